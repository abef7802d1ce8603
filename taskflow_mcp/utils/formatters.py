"""Formatting utilities for tool output."""

from taskflow_mcp.enums import View
from taskflow_mcp.models.results import TransitionResult
from taskflow_mcp.models.task import TaskCounts, TaskModel


def _format_task_concise(task: TaskModel) -> str:
    """
    Format a single task in concise format for token efficiency.

    Output: "#5: Name (high, due:2024-12-31, proj:3, done)"
    """
    name = task.name[:50] if task.name else "Untitled"

    meta = [task.priority.value]
    if task.due_date:
        meta.append(f"due:{task.due_date.isoformat()}")
    if task.project_id:
        meta.append(f"proj:{task.project_id}")
    if task.repeat and task.repeat != "none":
        meta.append(task.repeat)
    if task.totally_completed:
        meta.append("archived")
    elif task.completed:
        meta.append("done")

    return f"#{task.id}: {name} ({', '.join(meta)})"


def _format_tasks_concise(tasks: list[TaskModel], title: str | None = None) -> str:
    """
    Format a list of tasks in concise format.

    Output:
    2 task(s) | today
    #1: Task one (high, due:2025-01-10)
    #2: Task two (medium)
    """
    if not tasks:
        return "0 tasks"

    header = f"{len(tasks)} task(s)"
    if title:
        header = f"{len(tasks)} task(s) | {title}"
    return "\n".join([header, *(_format_task_concise(task) for task in tasks)])


def _format_task_markdown(task: TaskModel) -> str:
    """Format a single task as markdown."""
    lines = []

    icon = "[x]" if task.completed else "[ ]"
    lines.append(f"### {icon} [{task.id}] {task.name or 'Untitled'}")

    details = [f"**Priority**: {task.priority.value.capitalize()}"]
    if task.due_date:
        details.append(f"**Due**: {task.due_date.isoformat()}")
    if task.repeat and task.repeat != "none":
        details.append(f"**Repeats**: {task.repeat}")
    if task.project_id:
        details.append(f"**Project**: {task.project_id}")
    if task.section_id:
        details.append(f"**Section**: {task.section_id}")
    if task.totally_completed:
        details.append("**Archived**")
    if task.completed_date:
        details.append(f"**Completed**: {task.completed_date.isoformat(timespec='minutes')}")
    lines.append(" | ".join(details))

    if task.description:
        lines.append("")
        lines.append(task.description)

    return "\n".join(lines)


def _format_tasks_markdown(tasks: list[TaskModel], title: str = "Tasks") -> str:
    """Format a list of tasks as markdown."""
    if not tasks:
        return f"# {title}\n\nNo tasks found."

    lines = [f"# {title}", f"*{len(tasks)} task(s)*", ""]

    for task in tasks:
        lines.append(_format_task_markdown(task))
        lines.append("")

    return "\n".join(lines)


def _format_views(task: TaskModel, views: set[View]) -> str:
    """Format a classification result."""
    if not views:
        return f"Task {task.id} is not listed in any view."
    ordered = [view.value for view in View if view in views]
    return f"Task {task.id} appears in: {', '.join(ordered)}"


def _format_counts_markdown(counts: TaskCounts, loading: bool = False) -> str:
    lines = ["# Task Counts", ""]
    if loading:
        lines.append("*refresh in progress*")
        lines.append("")
    lines.append(f"- **Inbox**: {counts.inbox}")
    lines.append(f"- **Today**: {counts.today}")
    lines.append(f"- **Upcoming**: {counts.upcoming}")
    lines.append(f"- **Completed**: {counts.completed}")
    if counts.projects:
        lines.append("")
        lines.append("## Projects")
        for project_id, count in sorted(counts.projects.items()):
            lines.append(f"- {project_id}: {count}")
    return "\n".join(lines)


def _format_counts_concise(counts: TaskCounts) -> str:
    parts = [
        f"inbox:{counts.inbox}",
        f"today:{counts.today}",
        f"upcoming:{counts.upcoming}",
        f"completed:{counts.completed}",
    ]
    parts.extend(f"proj:{pid}={n}" for pid, n in sorted(counts.projects.items()))
    return " ".join(parts)


def _format_transition(result: TransitionResult) -> str:
    """Describe the outcome of a completion transition."""
    task = result.task
    if result.rolled_over and result.next_due_date:
        return f"Task {task.id} repeats; next due {result.next_due_date.isoformat()}."
    if task.totally_completed:
        return f"Task {task.id} sent to the completed list."
    if task.completed and result.section is not None:
        message = f"Task {task.id} marked as complete and moved to section '{result.section.name}' ({result.section.id})."
        if result.section_created:
            message += "\nA new Completed section was created; reload the view to see it."
        return message
    return f"Task {task.id} marked as not completed."
