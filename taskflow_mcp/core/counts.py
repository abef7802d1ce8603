"""Keep the task count aggregate in sync through pull refreshes and pushed snapshots."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from taskflow_mcp.core.events import EventBus, Unsubscribe
from taskflow_mcp.errors import ChannelClosed, ChannelError, TaskflowError
from taskflow_mcp.models.events import TaskEvent
from taskflow_mcp.models.task import TaskCounts
from taskflow_mcp.utils.channel import CountChannel, parse_count_message

DEFAULT_RECONNECT_DELAY = 3.0

CountsListener = Callable[[TaskCounts], None]


class CountSynchronizer:
    """
    Owns the ``TaskCounts`` aggregate.

    The aggregate is only ever replaced as a whole, either by a pull
    (``refresh``) or by a snapshot pushed on the live channel. Late pull
    responses may overwrite a newer snapshot; the next pull or push heals it.

    When the channel fails to open or closes abnormally, a pull is scheduled
    and a single reconnect attempt is armed ``reconnect_delay`` seconds out.
    A successful connection or ``close()`` cancels the pending attempt. A
    normal closure (code 1000) is never followed by a reconnect.

    Connection attempts are serialized: a second ``connect()`` waits for the
    first, then closes the channel it installed. ``close()`` cancels attempts
    still in flight, and a channel that finishes opening after ``close()`` is
    closed instead of installed.
    """

    def __init__(
        self,
        fetch_counts: Callable[[], Awaitable[TaskCounts]],
        channel_factory: Callable[[], CountChannel] | None = None,
        *,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        logger: logging.Logger | None = None,
    ) -> None:
        self._fetch_counts = fetch_counts
        self._channel_factory = channel_factory
        self._reconnect_delay = reconnect_delay
        self._logger = logger or logging.getLogger(__name__)

        self._counts = TaskCounts()
        self._loading = True
        self._listeners: list[CountsListener] = []

        self._channel: CountChannel | None = None
        self._reader: asyncio.Task[None] | None = None
        self._reconnect_handle: asyncio.TimerHandle | None = None
        self._background: set[asyncio.Task] = set()
        self._connecting: set[asyncio.Task] = set()
        self._connect_lock = asyncio.Lock()
        self._closed = False

    # ------------------------------------------------------------------
    # Aggregate
    # ------------------------------------------------------------------

    @property
    def counts(self) -> TaskCounts:
        return self._counts

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def is_connected(self) -> bool:
        return self._channel is not None

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_handle is not None

    def subscribe(self, listener: CountsListener) -> Unsubscribe:
        """Call ``listener`` with every new aggregate. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _replace(self, counts: TaskCounts) -> None:
        self._counts = counts
        for listener in list(self._listeners):
            try:
                listener(counts)
            except Exception:
                self._logger.exception("Count listener %r failed", listener)

    def apply_snapshot(self, counts: TaskCounts) -> None:
        """Install a pushed snapshot as-is."""
        self._loading = False
        self._replace(counts)
        self._logger.debug("Applied pushed task counts: %s", counts.model_dump())

    def handle_message(self, raw: str | bytes) -> bool:
        """Apply a live-channel frame. Returns True when it carried a snapshot."""
        try:
            counts = parse_count_message(raw)
        except ChannelError:
            self._logger.exception("Ignoring malformed live channel message")
            return False
        if counts is None:
            return False
        self.apply_snapshot(counts)
        return True

    # ------------------------------------------------------------------
    # Pull path
    # ------------------------------------------------------------------

    async def refresh(self) -> TaskCounts:
        """Fetch a fresh aggregate and install it. Store errors are logged and re-raised."""
        self._loading = True
        try:
            counts = await self._fetch_counts()
        except TaskflowError:
            self._logger.exception("Failed to refresh task counts")
            raise
        finally:
            self._loading = False
        self._replace(counts)
        self._logger.debug("Task counts refreshed: %s", counts.model_dump())
        return counts

    async def _refresh_in_background(self) -> None:
        try:
            await self.refresh()
        except TaskflowError:
            # Already logged by refresh(); the aggregate keeps its last value.
            return

    def _spawn(self, coro: Awaitable[object]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)  # type: ignore[arg-type]
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    def invalidate(self) -> None:
        """Schedule one pull refresh. Must be called from the event loop."""
        self._logger.debug("Task counts invalidated")
        self._spawn(self._refresh_in_background())

    def attach(self, bus: EventBus) -> Unsubscribe:
        """Invalidate the aggregate on every task change published on ``bus``."""
        return bus.on_any_change(self._on_task_change)

    def _on_task_change(self, event: TaskEvent) -> None:
        self._logger.debug("Task change detected: %s %s", event.kind, event.task_id)
        self.invalidate()

    async def drain(self) -> None:
        """Wait until every scheduled refresh and reconnect attempt has finished."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # ------------------------------------------------------------------
    # Push path
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Open the live channel, or pull once when no channel is configured."""
        self._closed = False
        if self._channel_factory is None:
            await self._refresh_in_background()
            return
        await self.connect()

    async def connect(self) -> bool:
        """
        (Re)open the live channel, replacing any existing connection.

        Returns:
            True when the channel is connected
        """
        if self._channel_factory is None:
            return False
        async with self._connect_lock:
            if self._closed:
                return False
            await self._close_channel()

            channel = self._channel_factory()
            try:
                await channel.open()
            except ChannelError as e:
                self._logger.error("Live count channel unavailable: %s", e)
                self._fall_back()
                return False

            if self._closed:
                await channel.close()
                self._logger.info("Discarding live count channel opened after close")
                return False

            self._cancel_reconnect()
            self._channel = channel
            self._reader = asyncio.get_running_loop().create_task(self._listen(channel))
            self._logger.info("Live count channel connected")
            return True

    async def _listen(self, channel: CountChannel) -> None:
        try:
            while True:
                self.handle_message(await channel.receive())
        except ChannelClosed as e:
            closed = e
        except ChannelError as e:
            self._logger.error("Live count channel failed: %s", e)
            closed = ChannelClosed(ChannelClosed.ABNORMAL_CLOSURE, str(e))

        if self._channel is channel:
            self._channel = None
            self._reader = None
        self._logger.info("Live count channel closed. Code: %s Reason: %s", closed.code, closed.reason)
        if not closed.is_normal:
            self._fall_back()

    def _fall_back(self) -> None:
        if self._closed:
            return
        self.invalidate()
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        if self._closed or self._reconnect_handle is not None:
            return
        self._logger.info("Reconnecting live count channel in %s seconds", self._reconnect_delay)
        loop = asyncio.get_running_loop()
        self._reconnect_handle = loop.call_later(self._reconnect_delay, self._reconnect)

    def _reconnect(self) -> None:
        self._reconnect_handle = None
        task = self._spawn(self.connect())
        self._connecting.add(task)
        task.add_done_callback(self._connecting.discard)

    def _cancel_reconnect(self) -> None:
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

    async def _close_channel(self) -> None:
        reader, self._reader = self._reader, None
        channel, self._channel = self._channel, None
        if reader is not None and reader is not asyncio.current_task():
            reader.cancel()
            await asyncio.gather(reader, return_exceptions=True)
        if channel is not None:
            await channel.close()

    async def close(self) -> None:
        """Tear down: cancel any pending reconnect and close the channel normally."""
        self._closed = True
        self._cancel_reconnect()
        pending = [task for task in self._connecting if task is not asyncio.current_task()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        await self._close_channel()
        self._logger.info("Count synchronizer closed")
