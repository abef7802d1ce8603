"""Output models returned by the lifecycle engine."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from taskflow_mcp.models.task import SectionModel, TaskModel


class SectionResolution(BaseModel):
    """A resolved "Completed" bucket and whether this call created it."""

    section: SectionModel
    created: bool


class TransitionResult(BaseModel):
    """Outcome of a completion state machine transition."""

    task: TaskModel
    section: SectionModel | None = None
    section_created: bool = False
    # Set when already-rendered views cannot show the change without a reload.
    refresh_required: bool = False
    rolled_over: bool = False
    next_due_date: date | None = None
