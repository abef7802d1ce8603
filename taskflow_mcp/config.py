"""Configuration loading for the Taskflow MCP server."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from taskflow_mcp.enums import WeekStart

DEFAULT_API_URL = "http://localhost:8000/api"
DEFAULT_WS_URL = "ws://localhost:8000/ws/task-counts/"
DEFAULT_RECONNECT_DELAY = 3.0
DEFAULT_HTTP_TIMEOUT = 30.0


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


@dataclass(frozen=True)
class AppConfig:
    api_url: str = DEFAULT_API_URL
    ws_url: str | None = DEFAULT_WS_URL
    reconnect_delay: float = DEFAULT_RECONNECT_DELAY
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    week_start: WeekStart = WeekStart.SUNDAY
    serialize_sections: bool = False
    log_level: str = "INFO"


_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return value[1:-1]
    return value


def _read_dotenv(dotenv_path: Path) -> dict[str, str]:
    """Parse ``KEY=value`` lines from a .env file. A missing or unreadable file is empty."""
    try:
        lines = dotenv_path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return {}

    values: dict[str, str] = {}
    for line in lines:
        entry = line.strip()
        if entry.startswith("export "):
            entry = entry[len("export ") :]
        name, sep, value = entry.partition("=")
        name = name.strip()
        if not sep or not name or name.startswith("#"):
            continue
        # First assignment wins.
        values.setdefault(name, _unquote(value.strip()))
    return values


class _Settings:
    """Environment variables layered over a parsed .env file."""

    def __init__(self, dotenv: dict[str, str]) -> None:
        self._dotenv = dotenv

    def get(self, key: str) -> str | None:
        value = os.environ.get(key)
        return value if value is not None else self._dotenv.get(key)

    def flag(self, key: str, *, default: bool) -> bool:
        raw_value = (self.get(key) or "").strip().lower()
        if not raw_value:
            return default
        if raw_value in _TRUE_VALUES:
            return True
        if raw_value in _FALSE_VALUES:
            return False
        raise ConfigError(f"{key} must be a boolean value.")

    def seconds(self, key: str, *, default: float) -> float:
        raw_value = (self.get(key) or "").strip()
        if not raw_value:
            return default
        try:
            seconds = float(raw_value)
        except ValueError as exc:
            raise ConfigError(f"{key} must be a number of seconds.") from exc
        if seconds <= 0:
            raise ConfigError(f"{key} must be greater than zero.")
        return seconds

    def week_start(self, key: str) -> WeekStart:
        raw_value = (self.get(key) or "").strip()
        if not raw_value:
            return WeekStart.SUNDAY
        try:
            return WeekStart[raw_value.upper()]
        except KeyError as exc:
            raise ConfigError(f"{key} must be 'sunday' or 'monday'.") from exc


def load_config(dotenv_path: Path | None = None) -> AppConfig:
    """Load configuration from the environment, falling back to ./.env."""
    settings = _Settings(_read_dotenv(dotenv_path or Path.cwd() / ".env"))

    api_url = (settings.get("TASKFLOW_API_URL") or "").strip() or DEFAULT_API_URL
    if not api_url.startswith(("http://", "https://")):
        raise ConfigError("TASKFLOW_API_URL must be an http(s) URL.")

    # An explicitly empty value disables the live channel.
    raw_ws_url = settings.get("TASKFLOW_WS_URL")
    if raw_ws_url is None:
        ws_url: str | None = DEFAULT_WS_URL
    else:
        ws_url = raw_ws_url.strip() or None
    if ws_url is not None and not ws_url.startswith(("ws://", "wss://")):
        raise ConfigError("TASKFLOW_WS_URL must be a ws(s) URL.")

    return AppConfig(
        api_url=api_url.rstrip("/"),
        ws_url=ws_url,
        reconnect_delay=settings.seconds("TASKFLOW_RECONNECT_DELAY", default=DEFAULT_RECONNECT_DELAY),
        http_timeout=settings.seconds("TASKFLOW_HTTP_TIMEOUT", default=DEFAULT_HTTP_TIMEOUT),
        week_start=settings.week_start("TASKFLOW_WEEK_START"),
        serialize_sections=settings.flag("TASKFLOW_SERIALIZE_SECTIONS", default=False),
        log_level=(settings.get("TASKFLOW_LOG_LEVEL") or "").strip().upper() or "INFO",
    )
