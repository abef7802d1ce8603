"""MCP tool definitions for Taskflow."""

# Import all tools to register them with the MCP server
from taskflow_mcp.tools.core import (
    taskflow_classify,
    taskflow_create_task,
    taskflow_delete_task,
    taskflow_get_task,
    taskflow_list_view,
    taskflow_update_task,
)
from taskflow_mcp.tools.lifecycle import (
    taskflow_archive,
    taskflow_complete,
    taskflow_counts,
    taskflow_uncomplete,
)

__all__ = [
    # Task tools
    "taskflow_get_task",
    "taskflow_classify",
    "taskflow_list_view",
    "taskflow_create_task",
    "taskflow_update_task",
    "taskflow_delete_task",
    # Lifecycle tools
    "taskflow_complete",
    "taskflow_uncomplete",
    "taskflow_archive",
    "taskflow_counts",
]
