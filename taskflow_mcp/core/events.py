"""In-process publish/subscribe channel for task-change notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from taskflow_mcp.enums import EventKind
from taskflow_mcp.models.events import TaskCompleted, TaskCreated, TaskDeleted, TaskEvent, TaskUpdated
from taskflow_mcp.models.task import TaskModel


EventCallback = Callable[[TaskEvent], None]
Unsubscribe = Callable[[], None]

ALL_KINDS = frozenset(EventKind)


@dataclass(eq=False)
class _Subscription:
    kinds: frozenset[EventKind]
    callback: EventCallback


class EventBus:
    """
    Synchronous event bus.

    Subscribers run in registration order before ``publish`` returns. A
    subscriber that raises is logged and skipped; the remaining subscribers
    still receive the event. Events published with no subscriber are lost.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._subscriptions: list[_Subscription] = []
        self._logger = logger or logging.getLogger(__name__)

    def subscribe(self, kinds: EventKind | Iterable[EventKind], callback: EventCallback) -> Unsubscribe:
        """Register ``callback`` for one or more event kinds. Returns an unsubscribe function."""
        if isinstance(kinds, EventKind):
            kinds = (kinds,)
        subscription = _Subscription(frozenset(kinds), callback)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    def on_task_created(self, callback: Callable[[TaskCreated], None]) -> Unsubscribe:
        return self.subscribe(EventKind.CREATED, callback)  # type: ignore[arg-type]

    def on_task_updated(self, callback: Callable[[TaskUpdated], None]) -> Unsubscribe:
        return self.subscribe(EventKind.UPDATED, callback)  # type: ignore[arg-type]

    def on_task_deleted(self, callback: Callable[[TaskDeleted], None]) -> Unsubscribe:
        return self.subscribe(EventKind.DELETED, callback)  # type: ignore[arg-type]

    def on_task_completed(self, callback: Callable[[TaskCompleted], None]) -> Unsubscribe:
        return self.subscribe(EventKind.COMPLETED, callback)  # type: ignore[arg-type]

    def on_any_change(self, callback: EventCallback) -> Unsubscribe:
        """Receive every event kind through a single registration (one call per event)."""
        return self.subscribe(ALL_KINDS, callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def publish(self, event: TaskEvent) -> None:
        kind = EventKind(event.kind)
        self._logger.debug("Publishing %s for task %s", kind.value, event.task_id)
        # Snapshot so callbacks may (un)subscribe while we deliver.
        for subscription in list(self._subscriptions):
            if kind not in subscription.kinds:
                continue
            try:
                subscription.callback(event)
            except Exception:
                self._logger.exception("Subscriber %r failed handling %s", subscription.callback, kind.value)

    # Convenience emitters

    def emit_task_created(self, task: TaskModel) -> None:
        self.publish(TaskCreated(task=task))

    def emit_task_updated(self, task_id: str, changes: dict[str, Any], task: TaskModel) -> None:
        self.publish(TaskUpdated(task_id=task_id, changes=changes, task=task))

    def emit_task_deleted(self, task_id: str, task: TaskModel | None) -> None:
        self.publish(TaskDeleted(task_id=task_id, task=task))

    def emit_task_completed(self, task_id: str, completed: bool, task: TaskModel) -> None:
        self.publish(TaskCompleted(task_id=task_id, completed=completed, task=task))
