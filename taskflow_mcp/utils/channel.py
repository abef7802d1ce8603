"""Receive-only live channel delivering task count snapshots."""

from __future__ import annotations

import json
from typing import Any, Protocol

from pydantic import ValidationError
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed

from taskflow_mcp.errors import ChannelClosed, ChannelError
from taskflow_mcp.models.task import TaskCounts

COUNT_UPDATE_MESSAGE = "task_count_update"


class CountChannel(Protocol):
    """A live connection pushing count snapshots."""

    async def open(self) -> None: ...

    async def receive(self) -> str | bytes: ...

    async def close(self, code: int = ChannelClosed.NORMAL_CLOSURE, reason: str = "") -> None: ...


def parse_count_message(raw: str | bytes) -> TaskCounts | None:
    """
    Parse a live-channel frame.

    Returns:
        The pushed snapshot for ``task_count_update`` messages, ``None`` for
        any other well-formed message

    Raises:
        ChannelError: if the frame is not JSON or its payload is not a
            valid count aggregate
    """
    try:
        message: Any = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ChannelError(f"Malformed channel frame: {e}") from e

    if not isinstance(message, dict) or message.get("type") != COUNT_UPDATE_MESSAGE:
        return None
    data = message.get("data")
    if data is None:
        return None
    try:
        return TaskCounts.model_validate(data)
    except ValidationError as e:
        raise ChannelError(f"Invalid count snapshot: {e}") from e


class WebSocketCountChannel:
    """``CountChannel`` over a websocket. The client never sends frames."""

    def __init__(self, url: str, *, open_timeout: float = 10.0) -> None:
        self.url = url
        self._open_timeout = open_timeout
        self._connection: ClientConnection | None = None

    async def open(self) -> None:
        try:
            self._connection = await connect(self.url, open_timeout=self._open_timeout)
        except (OSError, TimeoutError) as e:
            raise ChannelError(f"Could not connect to {self.url}: {e}") from e
        except Exception as e:
            # websockets raises InvalidURI / InvalidHandshake subclasses here.
            raise ChannelError(f"Could not connect to {self.url}: {type(e).__name__}: {e}") from e

    async def receive(self) -> str | bytes:
        if self._connection is None:
            raise ChannelClosed(ChannelClosed.ABNORMAL_CLOSURE, "not connected")
        try:
            return await self._connection.recv()
        except ConnectionClosed as e:
            self._connection = None
            if e.rcvd is None:
                raise ChannelClosed(ChannelClosed.ABNORMAL_CLOSURE, "no close frame received") from e
            raise ChannelClosed(e.rcvd.code, e.rcvd.reason) from e

    async def close(self, code: int = ChannelClosed.NORMAL_CLOSURE, reason: str = "") -> None:
        connection, self._connection = self._connection, None
        if connection is not None:
            await connection.close(code=code, reason=reason)
