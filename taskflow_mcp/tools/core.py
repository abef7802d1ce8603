"""Core task MCP tool definitions: read, classify, create, update, delete."""

import json

from mcp.server.fastmcp import Context
from mcp.types import ToolAnnotations

from taskflow_mcp.core.classifier import classify, filter_view
from taskflow_mcp.enums import ResponseFormat, View
from taskflow_mcp.errors import TaskflowError
from taskflow_mcp.models.inputs import (
    ClassifyTaskInput,
    CreateTaskInput,
    DeleteTaskInput,
    GetTaskInput,
    ListViewInput,
    UpdateTaskInput,
)
from taskflow_mcp.runtime import runtime_from
from taskflow_mcp.server import mcp
from taskflow_mcp.utils.formatters import (
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
    _format_views,
)


def _error(e: Exception) -> str:
    return f"Error: {e}"


@mcp.tool(
    name="taskflow_get_task",
    annotations=ToolAnnotations(
        title="Get Task",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskflow_get_task(params: GetTaskInput, ctx: Context) -> str:
    """
    Get a single task by ID.

    Args:
        params: GetTaskInput containing task_id and response_format

    Returns:
        The task in the requested format
    """
    runtime = runtime_from(ctx)
    try:
        task = await runtime.tasks.get_task(params.task_id)
    except TaskflowError as e:
        return _error(e)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(task.model_dump(mode="json"), indent=2)
    if params.response_format == ResponseFormat.CONCISE:
        return _format_task_concise(task)
    return _format_task_markdown(task)


@mcp.tool(
    name="taskflow_classify",
    annotations=ToolAnnotations(
        title="Classify Task",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskflow_classify(params: ClassifyTaskInput, ctx: Context) -> str:
    """
    Show which views (inbox, today, upcoming, overdue, project, completed) a task belongs to.

    Membership is computed from the due date and location at call time.

    Args:
        params: ClassifyTaskInput containing task_id and an optional 'today' override

    Returns:
        The list of views the task appears in
    """
    runtime = runtime_from(ctx)
    try:
        task = await runtime.tasks.get_task(params.task_id)
    except TaskflowError as e:
        return _error(e)
    today = params.today or runtime.today()
    return _format_views(task, classify(task, today, runtime.config.week_start))


@mcp.tool(
    name="taskflow_list_view",
    annotations=ToolAnnotations(
        title="List View",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskflow_list_view(params: ListViewInput, ctx: Context) -> str:
    """
    List the tasks currently in a view.

    USE THIS WHEN:
    - Showing what is due today, this/next week (upcoming) or overdue
    - Showing the Inbox, a project, or the completed list

    Args:
        params: ListViewInput containing view, project_id, limit and response_format

    Returns:
        Formatted list of tasks
    """
    if params.view == View.PROJECT and not params.project_id:
        return "Error: project_id is required for the project view"

    runtime = runtime_from(ctx)
    try:
        if params.view == View.COMPLETED:
            tasks = await runtime.client.list_completed_tasks(project_id=params.project_id)
        elif params.view == View.PROJECT:
            tasks = await runtime.client.list_tasks(project_id=params.project_id)
        else:
            tasks = await runtime.client.list_tasks()
    except TaskflowError as e:
        return _error(e)

    tasks = filter_view(
        tasks,
        params.view,
        runtime.today(),
        project_id=params.project_id,
        week_start=runtime.config.week_start,
    )
    total_count = len(tasks)
    if params.limit and len(tasks) > params.limit:
        tasks = tasks[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"total": total_count, "count": len(tasks), "tasks": [t.model_dump(mode="json") for t in tasks]},
            indent=2,
        )

    title = params.view.value.capitalize()
    if params.project_id:
        title += f" ({params.project_id})"
    if params.response_format == ResponseFormat.CONCISE:
        return _format_tasks_concise(tasks, params.view.value)
    return _format_tasks_markdown(tasks, title)


@mcp.tool(
    name="taskflow_create_task",
    annotations=ToolAnnotations(
        title="Create Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def taskflow_create_task(params: CreateTaskInput, ctx: Context) -> str:
    """
    Create a new task. Without a project_id the task lands in the Inbox.

    Args:
        params: CreateTaskInput containing name and optional attributes

    Returns:
        Confirmation message with the created task
    """
    runtime = runtime_from(ctx)
    fields = params.model_dump(mode="json")
    try:
        task = await runtime.tasks.create_task(fields)
    except TaskflowError as e:
        return _error(e)
    return f"Task created successfully.\n{_format_task_concise(task)}"


@mcp.tool(
    name="taskflow_update_task",
    annotations=ToolAnnotations(
        title="Update Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskflow_update_task(params: UpdateTaskInput, ctx: Context) -> str:
    """
    Update a task's name, description, due date, priority or repeat frequency.

    DO NOT USE WHEN:
    - Marking a task done or undone → use taskflow_complete / taskflow_uncomplete

    Args:
        params: UpdateTaskInput containing task_id and the fields to change

    Returns:
        Confirmation message with the updated task
    """
    changes = params.changes()
    if not changes:
        return "Error: No fields to update"

    runtime = runtime_from(ctx)
    try:
        task = await runtime.tasks.update_task(params.task_id, changes)
    except TaskflowError as e:
        return _error(e)
    return f"Task {params.task_id} updated.\n{_format_task_concise(task)}"


@mcp.tool(
    name="taskflow_delete_task",
    annotations=ToolAnnotations(
        title="Delete Task",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskflow_delete_task(params: DeleteTaskInput, ctx: Context) -> str:
    """
    Delete a task permanently.

    Args:
        params: DeleteTaskInput containing the task_id

    Returns:
        Confirmation message
    """
    runtime = runtime_from(ctx)
    try:
        await runtime.tasks.delete_task(params.task_id)
    except TaskflowError as e:
        return _error(e)
    return f"Task {params.task_id} deleted."
