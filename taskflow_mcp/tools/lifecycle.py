"""Completion lifecycle and count MCP tools."""

import json

from mcp.server.fastmcp import Context
from mcp.types import ToolAnnotations

from taskflow_mcp.enums import ResponseFormat
from taskflow_mcp.errors import TaskflowError
from taskflow_mcp.models.inputs import ArchiveTaskInput, CompleteTaskInput, CountsInput, UncompleteTaskInput
from taskflow_mcp.runtime import runtime_from
from taskflow_mcp.server import mcp
from taskflow_mcp.utils.formatters import _format_counts_concise, _format_counts_markdown, _format_transition


@mcp.tool(
    name="taskflow_complete",
    annotations=ToolAnnotations(
        title="Complete Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def taskflow_complete(params: CompleteTaskInput, ctx: Context) -> str:
    """
    Mark a task as done.

    Repeating tasks are not completed: their due date moves to the next
    occurrence and they stay open. Other tasks move into the "Completed"
    section of the view they were completed from (today, upcoming, their
    project, or the inbox); the section is created on first use.

    Args:
        params: CompleteTaskInput containing task_id and optional view_context

    Returns:
        Confirmation message describing where the task went
    """
    runtime = runtime_from(ctx)
    try:
        task = await runtime.tasks.get_task(params.task_id)
        result = await runtime.lifecycle.complete(task, params.view_context)
    except TaskflowError as e:
        return f"Error: {e}"
    return _format_transition(result)


@mcp.tool(
    name="taskflow_uncomplete",
    annotations=ToolAnnotations(
        title="Uncomplete Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskflow_uncomplete(params: UncompleteTaskInput, ctx: Context) -> str:
    """
    Undo a completion. The task stays in the section it was completed into.

    Args:
        params: UncompleteTaskInput containing the task_id

    Returns:
        Confirmation message
    """
    runtime = runtime_from(ctx)
    try:
        task = await runtime.tasks.get_task(params.task_id)
        result = await runtime.lifecycle.uncomplete(task)
    except TaskflowError as e:
        return f"Error: {e}"
    return _format_transition(result)


@mcp.tool(
    name="taskflow_archive",
    annotations=ToolAnnotations(
        title="Send Task to Completed List",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskflow_archive(params: ArchiveTaskInput, ctx: Context) -> str:
    """
    Send a completed task to the completed list (activity log).

    The task leaves every other view and its section. Only completed tasks
    can be archived.

    Args:
        params: ArchiveTaskInput containing the task_id

    Returns:
        Confirmation message
    """
    runtime = runtime_from(ctx)
    try:
        task = await runtime.tasks.get_task(params.task_id)
        result = await runtime.lifecycle.archive(task)
    except TaskflowError as e:
        return f"Error: {e}"
    return _format_transition(result)


@mcp.tool(
    name="taskflow_counts",
    annotations=ToolAnnotations(
        title="Task Counts",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskflow_counts(params: CountsInput, ctx: Context) -> str:
    """
    Show task counts for Inbox, Today, Upcoming, Completed and each project.

    Counts are kept current by live updates; set refresh=true to pull a new
    snapshot first.

    Args:
        params: CountsInput containing refresh and response_format

    Returns:
        Formatted counts
    """
    runtime = runtime_from(ctx)
    if params.refresh:
        try:
            await runtime.counts.refresh()
        except TaskflowError as e:
            return f"Error: {e}"

    counts = runtime.counts.counts
    if params.response_format == ResponseFormat.JSON:
        return json.dumps(counts.model_dump(mode="json"), indent=2)
    if params.response_format == ResponseFormat.CONCISE:
        return _format_counts_concise(counts)
    return _format_counts_markdown(counts, runtime.counts.is_loading)
