"""Classify tasks into time-based and location-based views."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime

from taskflow_mcp.core.dates import upcoming_window
from taskflow_mcp.enums import View, WeekStart
from taskflow_mcp.models.task import TaskCounts, TaskModel


def is_inbox_task(task: TaskModel) -> bool:
    """
    A task is located in the Inbox when it has no project and either no
    section or a section explicitly tagged as an Inbox section.
    """
    if task.project_id is not None:
        return False
    return task.section_id is None or View.INBOX in task.current_view


def classify(
    task: TaskModel,
    today: date,
    week_start: WeekStart = WeekStart.SUNDAY,
) -> set[View]:
    """
    Compute the set of views a task belongs to.

    Membership is derived from the due date and the task's location; the
    ``current_view`` tags stored on the task are advisory and only used to
    recognize Inbox sections. Archived tasks only appear in the Completed
    (activity) view.

    Args:
        task: Task to classify
        today: The local calendar day to classify against
        week_start: First day of the week for the Upcoming window

    Returns:
        Set of views the task belongs to
    """
    if task.totally_completed:
        return {View.COMPLETED}

    views: set[View] = set()

    if is_inbox_task(task):
        views.add(View.INBOX)
    if task.project_id is not None:
        views.add(View.PROJECT)

    due = task.due_date
    if due is None:
        return views

    if due == today:
        views.add(View.TODAY)

    window_start, window_end = upcoming_window(today, week_start)
    if window_start <= due <= window_end:
        views.add(View.UPCOMING)

    if due < today and not task.completed:
        views.add(View.OVERDUE)

    return views


def filter_view(
    tasks: Iterable[TaskModel],
    view: View,
    today: date,
    project_id: str | None = None,
    week_start: WeekStart = WeekStart.SUNDAY,
) -> list[TaskModel]:
    """
    Select the tasks that belong to a view.

    The project view is restricted to ``project_id`` when given. The
    Completed view is ordered by ``completed_date``, most recent first.
    """
    selected = [
        task
        for task in tasks
        if view in classify(task, today, week_start)
        and (view != View.PROJECT or project_id is None or task.project_id == project_id)
    ]
    if view == View.COMPLETED:
        selected.sort(key=lambda t: t.completed_date or datetime.min, reverse=True)
    elif view in (View.UPCOMING, View.OVERDUE):
        selected.sort(key=lambda t: t.due_date or date.max)
    return selected


def count_tasks(
    tasks: Iterable[TaskModel],
    today: date,
    week_start: WeekStart = WeekStart.SUNDAY,
) -> TaskCounts:
    """
    Recompute the count aggregate from the task set.

    View and project counts include Active tasks only; ``completed`` counts
    archived tasks.
    """
    totals: Counter[View] = Counter()
    projects: Counter[str] = Counter()

    for task in tasks:
        views = classify(task, today, week_start)
        if View.COMPLETED in views:
            totals[View.COMPLETED] += 1
            continue
        if task.completed:
            continue
        totals.update(views & {View.INBOX, View.TODAY, View.UPCOMING})
        if task.project_id is not None:
            projects[task.project_id] += 1

    return TaskCounts(
        inbox=totals[View.INBOX],
        today=totals[View.TODAY],
        upcoming=totals[View.UPCOMING],
        completed=totals[View.COMPLETED],
        projects=dict(projects),
    )
