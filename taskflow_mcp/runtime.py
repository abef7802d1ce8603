"""Wiring of the engine components into one injectable runtime."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

import httpx
from mcp.server.fastmcp import Context

from taskflow_mcp.config import AppConfig
from taskflow_mcp.core.completion import CompletionStateMachine
from taskflow_mcp.core.counts import CountSynchronizer
from taskflow_mcp.core.dates import local_today
from taskflow_mcp.core.events import EventBus, Unsubscribe
from taskflow_mcp.core.sections import SectionResolver
from taskflow_mcp.core.stores import NotifyingTaskStore
from taskflow_mcp.models.task import TaskCounts
from taskflow_mcp.utils.api import TaskflowApiClient
from taskflow_mcp.utils.channel import CountChannel, WebSocketCountChannel


@dataclass
class TaskflowRuntime:
    """Everything a tool call needs, owned by the server lifespan."""

    config: AppConfig
    client: TaskflowApiClient
    bus: EventBus
    tasks: NotifyingTaskStore
    sections: SectionResolver
    lifecycle: CompletionStateMachine
    counts: CountSynchronizer
    today: Callable[[], date] = local_today
    _detach: Unsubscribe | None = field(default=None, repr=False)

    async def start(self) -> None:
        self._detach = self.counts.attach(self.bus)
        await self.counts.start()

    async def aclose(self) -> None:
        if self._detach is not None:
            self._detach()
            self._detach = None
        await self.counts.close()
        await self.client.aclose()


def build_runtime(
    config: AppConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    channel_factory: Callable[[], CountChannel] | None = None,
    today: Callable[[], date] = local_today,
    logger: logging.Logger | None = None,
) -> TaskflowRuntime:
    """
    Build a runtime from configuration.

    ``transport`` and ``channel_factory`` replace the network layers (used by
    tests). Without a channel factory the websocket channel from
    ``config.ws_url`` is used; with no URL configured the counts are pull-only.
    """
    logger = logger or logging.getLogger("taskflow_mcp")
    client = TaskflowApiClient(config.api_url, timeout=config.http_timeout, transport=transport, logger=logger)
    bus = EventBus(logger=logger)
    tasks = NotifyingTaskStore(client, bus, logger=logger)
    sections = SectionResolver(client, serialize=config.serialize_sections, logger=logger)
    lifecycle = CompletionStateMachine(tasks, sections, today=today, logger=logger)

    if channel_factory is None and config.ws_url:
        ws_url = config.ws_url

        def channel_factory() -> CountChannel:
            return WebSocketCountChannel(ws_url)

    async def fetch_counts() -> TaskCounts:
        return await client.get_task_counts(today())

    counts = CountSynchronizer(
        fetch_counts,
        channel_factory,
        reconnect_delay=config.reconnect_delay,
        logger=logger,
    )
    return TaskflowRuntime(
        config=config,
        client=client,
        bus=bus,
        tasks=tasks,
        sections=sections,
        lifecycle=lifecycle,
        counts=counts,
        today=today,
    )


def runtime_from(ctx: Context) -> TaskflowRuntime:
    """Return the runtime installed by the server lifespan."""
    return ctx.request_context.lifespan_context
