"""Pytest configuration and fixtures for taskflow-mcp tests."""

import asyncio
import itertools
import json
from datetime import date
from typing import Any

import pytest

from taskflow_mcp.core.events import EventBus
from taskflow_mcp.errors import ChannelClosed, ChannelError, StoreError
from taskflow_mcp.models.task import SectionModel, TaskCounts, TaskModel

# A Friday. With Sunday-start weeks the upcoming window is 2025-01-05..2025-01-18.
TODAY = date(2025, 1, 10)


class InMemoryStore:
    """Task and section store double that records every call."""

    def __init__(self, tasks=(), sections=()):
        self.tasks: dict[str, TaskModel] = {t.id: t for t in tasks}
        self.sections: dict[str, SectionModel] = {s.id: s for s in sections}
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()
        self.counts = TaskCounts()
        self.closed = False
        self._ids = itertools.count(100)

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, *args))
        if operation in self.fail_on:
            raise StoreError(operation, "HTTP 500: server error", status_code=500)

    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]

    def _task(self, operation: str, task_id: str) -> TaskModel:
        try:
            return self.tasks[task_id]
        except KeyError:
            raise StoreError(operation, "HTTP 404: not found", status_code=404) from None

    def _patch(self, operation: str, task_id: str, fields: dict[str, Any]) -> TaskModel:
        current = self._task(operation, task_id)
        updated = TaskModel.model_validate({**current.model_dump(), **fields})
        self.tasks[task_id] = updated
        return updated

    # Tasks

    async def get_task(self, task_id):
        self._record("get_task", task_id)
        return self._task("get_task", task_id)

    async def create_task(self, fields):
        self._record("create_task", fields)
        task = TaskModel.model_validate({"id": str(next(self._ids)), **fields})
        self.tasks[task.id] = task
        return task

    async def update_task(self, task_id, fields):
        self._record("update_task", task_id, fields)
        return self._patch("update_task", task_id, fields)

    async def update_completion(self, task_id, completed):
        self._record("update_completion", task_id, completed)
        return self._patch("update_completion", task_id, {"completed": completed})

    async def update_total_completion(self, task_id, totally_completed):
        self._record("update_total_completion", task_id, totally_completed)
        # Like the real backend, total completion does not touch the section.
        return self._patch("update_total_completion", task_id, {"totally_completed": totally_completed})

    async def move_to_project(self, task_id, project_id):
        self._record("move_to_project", task_id, project_id)
        return self._patch("move_to_project", task_id, {"project_id": project_id})

    async def move_to_section(self, task_id, section_id):
        self._record("move_to_section", task_id, section_id)
        return self._patch("move_to_section", task_id, {"section_id": section_id})

    async def make_unsectioned(self, task_id):
        self._record("make_unsectioned", task_id)
        return self._patch("make_unsectioned", task_id, {"section_id": None})

    async def update_views(self, task_id, views):
        self._record("update_views", task_id, views)
        return self._patch("update_views", task_id, {"current_view": views})

    async def delete_task(self, task_id):
        self._record("delete_task", task_id)
        self._task("delete_task", task_id)
        del self.tasks[task_id]

    async def list_tasks(self, **filters):
        self._record("list_tasks", filters)
        project_id = filters.get("project_id")
        return [t for t in self.tasks.values() if project_id is None or t.project_id == project_id]

    async def list_completed_tasks(self, project_id=None, section_id=None):
        self._record("list_completed_tasks", project_id, section_id)
        return [
            t
            for t in self.tasks.values()
            if t.totally_completed and (project_id is None or t.project_id == project_id)
        ]

    async def get_task_counts(self, today):
        self._record("get_task_counts", today)
        return self.counts

    # Sections

    async def list_sections(self, project_id=None, view=None):
        self._record("list_sections", project_id, view)
        # Yield so concurrent callers can interleave like real requests.
        await asyncio.sleep(0)
        return [
            s
            for s in self.sections.values()
            if s.project_id == project_id and (view is None or view in s.current_view)
        ]

    async def create_section(self, name, project_id=None, current_view=None):
        self._record("create_section", name, project_id, current_view)
        await asyncio.sleep(0)
        section = SectionModel(
            id=f"s{next(self._ids)}",
            name=name,
            project_id=project_id,
            current_view=current_view or [],
        )
        self.sections[section.id] = section
        return section

    async def aclose(self):
        self.closed = True


class FakeChannel:
    """Live count channel double fed through ``push`` and ``drop``."""

    def __init__(self, fail_open: bool = False, gate: asyncio.Event | None = None):
        self.fail_open = fail_open
        self.gate = gate
        self.opened = False
        self.closed_with: int | None = None
        self._frames: asyncio.Queue = asyncio.Queue()

    async def open(self):
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_open:
            raise ChannelError("Could not connect: connection refused")
        self.opened = True

    async def receive(self):
        frame = await self._frames.get()
        if isinstance(frame, ChannelClosed):
            raise frame
        return frame

    async def close(self, code=ChannelClosed.NORMAL_CLOSURE, reason=""):
        self.closed_with = code
        self._frames.put_nowait(ChannelClosed(code, reason))

    def push(self, message: Any) -> None:
        self._frames.put_nowait(message if isinstance(message, str) else json.dumps(message))

    def drop(self, code: int = ChannelClosed.ABNORMAL_CLOSURE, reason: str = "") -> None:
        self._frames.put_nowait(ChannelClosed(code, reason))


class ChannelFactory:
    """Hands out queued channels, then healthy new ones."""

    def __init__(self, *channels: FakeChannel):
        self.queued = list(channels)
        self.created: list[FakeChannel] = []

    def __call__(self) -> FakeChannel:
        channel = self.queued.pop(0) if self.queued else FakeChannel()
        self.created.append(channel)
        return channel


async def settle(rounds: int = 5) -> None:
    """Let background tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def make_task(**overrides: Any) -> TaskModel:
    fields: dict[str, Any] = {"id": "1", "name": "Write report"}
    fields.update(overrides)
    return TaskModel.model_validate(fields)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorded_events(bus):
    events = []
    bus.on_any_change(events.append)
    return events
