"""Task-change event payloads published on the in-process event bus."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from taskflow_mcp.models.task import TaskModel


class TaskCreated(BaseModel):
    """A task was created."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["task_created"] = "task_created"
    task: TaskModel

    @property
    def task_id(self) -> str:
        return self.task.id


class TaskUpdated(BaseModel):
    """Some fields of a task changed."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["task_updated"] = "task_updated"
    task_id: str
    changes: dict[str, Any] = Field(default_factory=dict)
    task: TaskModel


class TaskDeleted(BaseModel):
    """A task was deleted. ``task`` is the last known copy, if one could be fetched."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["task_deleted"] = "task_deleted"
    task_id: str
    task: TaskModel | None = None


class TaskCompleted(BaseModel):
    """A task's completion (or total completion) flag changed."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["task_completed"] = "task_completed"
    task_id: str
    completed: bool
    task: TaskModel


TaskEvent = Annotated[
    Union[TaskCreated, TaskUpdated, TaskDeleted, TaskCompleted],
    Field(discriminator="kind"),
]
