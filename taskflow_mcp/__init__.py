"""
MCP Server for a personal task manager.

This server exposes the task lifecycle and view synchronization engine:
classifying tasks into Inbox/Today/Upcoming/Overdue/Project views,
completing tasks into per-scope "Completed" sections, rolling repeating
tasks forward, archiving, and keeping view counts in sync through an event
bus and a live count channel.
"""

# Re-export enums
from taskflow_mcp.enums import EventKind, Priority, RepeatFrequency, ResponseFormat, TaskState, View, WeekStart

# Re-export errors
from taskflow_mcp.errors import (
    ChannelClosed,
    ChannelError,
    InvalidTransitionError,
    StoreError,
    TaskflowError,
    UnknownFrequencyError,
)

# Re-export models
from taskflow_mcp.models import (
    ArchiveTaskInput,
    ClassifyTaskInput,
    CompleteTaskInput,
    CountsInput,
    CreateTaskInput,
    DeleteTaskInput,
    GetTaskInput,
    ListViewInput,
    ProjectModel,
    SectionModel,
    SectionResolution,
    TaskCompleted,
    TaskCounts,
    TaskCreated,
    TaskDeleted,
    TaskModel,
    TaskUpdated,
    TransitionResult,
    UncompleteTaskInput,
    UpdateTaskInput,
)

# Re-export the engine
from taskflow_mcp.core import (
    COMPLETED_SECTION_NAME,
    CompletedScope,
    CompletionStateMachine,
    CountSynchronizer,
    EventBus,
    NotifyingTaskStore,
    SectionResolver,
    advance,
    classify,
    count_tasks,
    filter_view,
    state_of,
)

# Re-export MCP server instance
from taskflow_mcp.server import mcp

# Re-export tools
from taskflow_mcp.tools import (
    taskflow_archive,
    taskflow_classify,
    taskflow_complete,
    taskflow_counts,
    taskflow_create_task,
    taskflow_delete_task,
    taskflow_get_task,
    taskflow_list_view,
    taskflow_uncomplete,
    taskflow_update_task,
)

# Re-export utilities
from taskflow_mcp.utils import TaskflowApiClient, WebSocketCountChannel, parse_count_message

__all__ = [
    # Enums
    "ResponseFormat",
    "View",
    "Priority",
    "RepeatFrequency",
    "TaskState",
    "EventKind",
    "WeekStart",
    # Errors
    "TaskflowError",
    "StoreError",
    "UnknownFrequencyError",
    "InvalidTransitionError",
    "ChannelError",
    "ChannelClosed",
    # Models
    "TaskModel",
    "SectionModel",
    "ProjectModel",
    "TaskCounts",
    "TaskCreated",
    "TaskUpdated",
    "TaskDeleted",
    "TaskCompleted",
    "SectionResolution",
    "TransitionResult",
    # Tool input models
    "GetTaskInput",
    "ClassifyTaskInput",
    "ListViewInput",
    "CompleteTaskInput",
    "UncompleteTaskInput",
    "ArchiveTaskInput",
    "CreateTaskInput",
    "UpdateTaskInput",
    "DeleteTaskInput",
    "CountsInput",
    # Engine
    "classify",
    "filter_view",
    "count_tasks",
    "advance",
    "state_of",
    "COMPLETED_SECTION_NAME",
    "CompletedScope",
    "SectionResolver",
    "CompletionStateMachine",
    "EventBus",
    "NotifyingTaskStore",
    "CountSynchronizer",
    # Network layers
    "TaskflowApiClient",
    "WebSocketCountChannel",
    "parse_count_message",
    # Tools
    "taskflow_get_task",
    "taskflow_classify",
    "taskflow_list_view",
    "taskflow_create_task",
    "taskflow_update_task",
    "taskflow_delete_task",
    "taskflow_complete",
    "taskflow_uncomplete",
    "taskflow_archive",
    "taskflow_counts",
    # MCP server instance
    "mcp",
]
