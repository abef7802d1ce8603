"""Utility functions for Taskflow MCP."""

from taskflow_mcp.utils.api import TaskflowApiClient
from taskflow_mcp.utils.channel import WebSocketCountChannel, parse_count_message
from taskflow_mcp.utils.formatters import _format_task_markdown, _format_tasks_markdown
from taskflow_mcp.utils.parsers import _parse_task, _parse_tasks

__all__ = [
    "TaskflowApiClient",
    "WebSocketCountChannel",
    "parse_count_message",
    "_parse_task",
    "_parse_tasks",
    "_format_task_markdown",
    "_format_tasks_markdown",
]
