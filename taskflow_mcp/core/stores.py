"""Store interfaces consumed by the engine, and an event-publishing task store."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Protocol

from taskflow_mcp.core.events import EventBus
from taskflow_mcp.enums import View
from taskflow_mcp.errors import StoreError
from taskflow_mcp.models.task import SectionModel, TaskCounts, TaskModel


class TaskStore(Protocol):
    """Task operations of the external store."""

    async def get_task(self, task_id: str) -> TaskModel: ...

    async def create_task(self, fields: dict[str, Any]) -> TaskModel: ...

    async def update_task(self, task_id: str, fields: dict[str, Any]) -> TaskModel: ...

    async def update_completion(self, task_id: str, completed: bool) -> TaskModel: ...

    async def update_total_completion(self, task_id: str, totally_completed: bool) -> TaskModel: ...

    async def move_to_project(self, task_id: str, project_id: str) -> TaskModel: ...

    async def move_to_section(self, task_id: str, section_id: str) -> TaskModel: ...

    async def make_unsectioned(self, task_id: str) -> TaskModel: ...

    async def update_views(self, task_id: str, views: list[View]) -> TaskModel: ...

    async def delete_task(self, task_id: str) -> None: ...

    async def list_tasks(self, **filters: Any) -> list[TaskModel]: ...

    async def get_task_counts(self, today: date) -> TaskCounts: ...


class SectionStore(Protocol):
    """Section operations of the external store."""

    async def list_sections(self, project_id: str | None = None, view: View | None = None) -> list[SectionModel]: ...

    async def create_section(
        self, name: str, project_id: str | None = None, current_view: list[View] | None = None
    ) -> SectionModel: ...


class NotifyingTaskStore:
    """
    Wraps a ``TaskStore`` and publishes a bus event after every successful
    mutation. Failed mutations are logged and re-raised; nothing is
    published for them.
    """

    def __init__(self, store: TaskStore, bus: EventBus, logger: logging.Logger | None = None) -> None:
        self._store = store
        self._bus = bus
        self._logger = logger or logging.getLogger(__name__)

    @property
    def store(self) -> TaskStore:
        return self._store

    async def get_task(self, task_id: str) -> TaskModel:
        return await self._store.get_task(task_id)

    async def list_tasks(self, **filters: Any) -> list[TaskModel]:
        return await self._store.list_tasks(**filters)

    async def get_task_counts(self, today: date) -> TaskCounts:
        return await self._store.get_task_counts(today)

    async def create_task(self, fields: dict[str, Any]) -> TaskModel:
        try:
            task = await self._store.create_task(fields)
        except StoreError:
            self._logger.error("Failed to create task %r", fields.get("name"))
            raise
        self._bus.emit_task_created(task)
        return task

    async def update_task(self, task_id: str, fields: dict[str, Any]) -> TaskModel:
        try:
            task = await self._store.update_task(task_id, fields)
        except StoreError:
            self._logger.error("Failed to update task %s", task_id)
            raise
        self._bus.emit_task_updated(task_id, fields, task)
        return task

    async def update_completion(self, task_id: str, completed: bool) -> TaskModel:
        try:
            task = await self._store.update_completion(task_id, completed)
        except StoreError:
            self._logger.error("Failed to update completion of task %s", task_id)
            raise
        self._bus.emit_task_completed(task_id, completed, task)
        return task

    async def update_total_completion(self, task_id: str, totally_completed: bool) -> TaskModel:
        try:
            task = await self._store.update_total_completion(task_id, totally_completed)
        except StoreError:
            self._logger.error("Failed to update total completion of task %s", task_id)
            raise
        self._bus.emit_task_completed(task_id, totally_completed, task)
        return task

    async def move_to_project(self, task_id: str, project_id: str) -> TaskModel:
        try:
            task = await self._store.move_to_project(task_id, project_id)
        except StoreError:
            self._logger.error("Failed to move task %s to project %s", task_id, project_id)
            raise
        self._bus.emit_task_updated(task_id, {"project_id": project_id}, task)
        return task

    async def move_to_section(self, task_id: str, section_id: str) -> TaskModel:
        try:
            task = await self._store.move_to_section(task_id, section_id)
        except StoreError:
            self._logger.error("Failed to move task %s to section %s", task_id, section_id)
            raise
        self._bus.emit_task_updated(task_id, {"section_id": section_id}, task)
        return task

    async def make_unsectioned(self, task_id: str) -> TaskModel:
        try:
            task = await self._store.make_unsectioned(task_id)
        except StoreError:
            self._logger.error("Failed to make task %s unsectioned", task_id)
            raise
        self._bus.emit_task_updated(task_id, {"section_id": None}, task)
        return task

    async def update_views(self, task_id: str, views: list[View]) -> TaskModel:
        try:
            task = await self._store.update_views(task_id, views)
        except StoreError:
            self._logger.error("Failed to update views of task %s", task_id)
            raise
        self._bus.emit_task_updated(task_id, {"current_view": [View(v).value for v in views]}, task)
        return task

    async def delete_task(self, task_id: str, last_known: TaskModel | None = None) -> None:
        if last_known is None:
            try:
                last_known = await self._store.get_task(task_id)
            except StoreError as exc:
                self._logger.warning("Could not fetch task %s before deletion: %s", task_id, exc)
        try:
            await self._store.delete_task(task_id)
        except StoreError:
            self._logger.error("Failed to delete task %s", task_id)
            raise
        self._bus.emit_task_deleted(task_id, last_known)
