"""Three-state completion lifecycle: Active -> Completed -> Archived."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from taskflow_mcp.core.dates import format_local_date, local_today
from taskflow_mcp.core.recurrence import advance, is_repeating
from taskflow_mcp.core.sections import CompletedScope, SectionResolver
from taskflow_mcp.core.stores import NotifyingTaskStore
from taskflow_mcp.enums import TaskState, View
from taskflow_mcp.errors import InvalidTransitionError, TaskflowError
from taskflow_mcp.models.results import TransitionResult
from taskflow_mcp.models.task import TaskModel


def state_of(task: TaskModel) -> TaskState:
    """Lifecycle state of a task."""
    if task.totally_completed:
        return TaskState.ARCHIVED
    if task.completed:
        return TaskState.COMPLETED
    return TaskState.ACTIVE


class CompletionStateMachine:
    """
    Drives completion transitions against the store.

    Every mutation goes through a ``NotifyingTaskStore`` so each step
    publishes its event. Multi-step transitions are not atomic: a failure
    after the move but before the completion flag leaves the task moved but
    still Active. Store errors are logged and re-raised, and the task passed
    in is never modified.
    """

    def __init__(
        self,
        tasks: NotifyingTaskStore,
        sections: SectionResolver,
        *,
        today: Callable[[], date] = local_today,
        logger: logging.Logger | None = None,
    ) -> None:
        self._tasks = tasks
        self._sections = sections
        self._today = today
        self._logger = logger or logging.getLogger(__name__)

    async def set_completed(
        self,
        task: TaskModel,
        completed: bool,
        view_context: View | None = None,
    ) -> TransitionResult:
        """Checkbox entry point: complete or undo depending on ``completed``."""
        if completed:
            return await self.complete(task, view_context)
        return await self.uncomplete(task)

    async def complete(self, task: TaskModel, view_context: View | None = None) -> TransitionResult:
        """
        Mark a task done.

        Repeating tasks are rolled forward to their next due date and stay
        Active. Other tasks are moved into the Completed bucket of the scope
        derived from ``view_context`` and flagged completed.
        """
        self._require_not_archived(task, "complete")

        if is_repeating(task.repeat):
            return await self._roll_forward(task)

        scope = CompletedScope.for_task(task, view_context)
        try:
            resolution = await self._sections.get_or_create_completed_section(scope)
            await self._tasks.move_to_section(task.id, resolution.section.id)
            self._logger.debug("Task %s moved to section %s", task.id, resolution.section.id)
            updated = await self._tasks.update_completion(task.id, True)
        except TaskflowError:
            self._logger.exception("Completing task %s in scope %s failed", task.id, scope.label)
            raise

        # Trust the store's copy but make sure the transition's own fields hold.
        if updated.section_id != resolution.section.id or not updated.completed:
            updated = updated.model_copy(update={"section_id": resolution.section.id, "completed": True})
        self._logger.info(
            "Task %s completed into section %s (created=%s)",
            task.id,
            resolution.section.id,
            resolution.created,
        )
        return TransitionResult(
            task=updated,
            section=resolution.section,
            section_created=resolution.created,
            refresh_required=resolution.created,
        )

    async def uncomplete(self, task: TaskModel) -> TransitionResult:
        """
        Undo a completion.

        The task keeps whatever section it is in; it is not moved back to
        where it was before completion.
        """
        self._require_not_archived(task, "uncomplete")
        try:
            updated = await self._tasks.update_completion(task.id, False)
        except TaskflowError:
            self._logger.exception("Undoing completion of task %s failed", task.id)
            raise
        if updated.completed:
            updated = updated.model_copy(update={"completed": False})
        self._logger.info("Task %s marked as not completed", task.id)
        return TransitionResult(task=updated, refresh_required=True)

    async def archive(self, task: TaskModel) -> TransitionResult:
        """
        Send a completed task to the completed list.

        Sets ``totally_completed`` and detaches the task from its section.
        Archived is terminal for this engine.
        """
        state = state_of(task)
        if state != TaskState.COMPLETED:
            raise InvalidTransitionError(task.id, state.value, "archive")
        try:
            updated = await self._tasks.update_total_completion(task.id, True)
            if updated.section_id is not None:
                updated = await self._tasks.make_unsectioned(task.id)
        except TaskflowError:
            self._logger.exception("Archiving task %s failed", task.id)
            raise
        updated = updated.model_copy(update={"totally_completed": True, "completed": True, "section_id": None})
        self._logger.info("Task %s archived", task.id)
        return TransitionResult(task=updated, refresh_required=True)

    async def _roll_forward(self, task: TaskModel) -> TransitionResult:
        base = task.due_date or self._today()
        next_due = advance(base, task.repeat or "")
        fields = {"due_date": format_local_date(next_due), "completed": False}
        try:
            updated = await self._tasks.update_task(task.id, fields)
        except TaskflowError:
            self._logger.exception("Rolling repeating task %s forward failed", task.id)
            raise
        if updated.due_date != next_due or updated.completed:
            updated = updated.model_copy(update={"due_date": next_due, "completed": False})
        self._logger.info("Repeating task %s rolled forward to %s", task.id, format_local_date(next_due))
        return TransitionResult(
            task=updated,
            rolled_over=True,
            next_due_date=next_due,
            refresh_required=True,
        )

    @staticmethod
    def _require_not_archived(task: TaskModel, transition: str) -> None:
        if task.totally_completed:
            raise InvalidTransitionError(task.id, TaskState.ARCHIVED.value, transition)
