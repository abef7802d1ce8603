"""Enums for Taskflow MCP."""

from enum import Enum


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    CONCISE = "concise"  # Minimal output for chaining
    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class View(str, Enum):
    """Views a task can be listed under."""

    INBOX = "inbox"
    TODAY = "today"
    UPCOMING = "upcoming"
    PROJECT = "project"
    OVERDUE = "overdue"
    CALENDAR = "calendar"
    COMPLETED = "completed"  # Activity log, keyed by completed_date


class Priority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"
    EMERGENCY = "emergency"


class RepeatFrequency(str, Enum):
    """Repeat frequencies understood by the recurrence engine."""

    NONE = "none"
    EVERY_DAY = "every day"
    EVERY_WEEK = "every week"
    EVERY_MONTH = "every month"
    EVERY_YEAR = "every year"


class TaskState(str, Enum):
    """Completion lifecycle states."""

    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class EventKind(str, Enum):
    """Kinds of task-change notifications published on the event bus."""

    CREATED = "task_created"
    UPDATED = "task_updated"
    DELETED = "task_deleted"
    COMPLETED = "task_completed"


class WeekStart(int, Enum):
    """First day of the week, as ``date.weekday()`` numbers."""

    MONDAY = 0
    SUNDAY = 6
