"""Core task, section, project and count models for Taskflow MCP."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from taskflow_mcp.enums import Priority, View


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _known_views(value: Any) -> list[str]:
    """Drop view tags this engine does not know about."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    known = {view.value for view in View}
    tags = [item.value if isinstance(item, View) else item for item in value]
    return [tag for tag in tags if tag in known]


class TaskModel(BaseModel):
    """Model representing a task as returned by the task store."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True, populate_by_name=True)

    id: str
    name: str = ""
    description: str | None = None
    due_date: date | None = None
    reminder_date: datetime | None = None
    duration_in_minutes: int = 15
    # The backend spells this field "piority".
    priority: Priority = Field(default=Priority.MEDIUM, validation_alias=AliasChoices("priority", "piority"))
    repeat: str | None = None
    project_id: str | None = None
    section_id: str | None = None
    current_view: list[View] = Field(default_factory=list)
    completed: bool = False
    totally_completed: bool = False
    completed_date: datetime | None = None

    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due_date(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        # Full ISO datetimes are reduced to their calendar day.
        if isinstance(v, str) and len(v) > 10 and v[10] in "T ":
            return v[:10]
        if isinstance(v, datetime):
            return v.date()
        return v

    @field_validator("reminder_date", "completed_date", "repeat", "project_id", "section_id", mode="before")
    @classmethod
    def _empty_is_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("current_view", mode="before")
    @classmethod
    def _filter_views(cls, v: Any) -> Any:
        return _known_views(v)


class SectionModel(BaseModel):
    """A named grouping of tasks inside a view or a project."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    name: str
    project_id: str | None = None
    current_view: list[View] = Field(default_factory=list)

    @field_validator("current_view", mode="before")
    @classmethod
    def _filter_views(cls, v: Any) -> Any:
        return _known_views(v)


class ProjectModel(BaseModel):
    """Project metadata. Only read by the engine."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    name: str
    color: str | None = None
    icon: str | None = None
    parent_id: str | None = None


class TaskCounts(BaseModel):
    """Aggregate task counts per view and per project.

    Instances are immutable: the synchronizer replaces the whole aggregate
    on every refresh or pushed snapshot.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    inbox: int = 0
    today: int = 0
    upcoming: int = 0
    completed: int = 0
    projects: dict[str, int] = Field(default_factory=dict)
