"""Pydantic models for Taskflow MCP."""

from taskflow_mcp.models.events import TaskCompleted, TaskCreated, TaskDeleted, TaskEvent, TaskUpdated
from taskflow_mcp.models.inputs import (
    ArchiveTaskInput,
    ClassifyTaskInput,
    CompleteTaskInput,
    CountsInput,
    CreateTaskInput,
    DeleteTaskInput,
    GetTaskInput,
    ListViewInput,
    UncompleteTaskInput,
    UpdateTaskInput,
)
from taskflow_mcp.models.results import SectionResolution, TransitionResult
from taskflow_mcp.models.task import ProjectModel, SectionModel, TaskCounts, TaskModel

__all__ = [
    # Store models
    "TaskModel",
    "SectionModel",
    "ProjectModel",
    "TaskCounts",
    # Events
    "TaskCreated",
    "TaskUpdated",
    "TaskDeleted",
    "TaskCompleted",
    "TaskEvent",
    # Engine results
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
]
