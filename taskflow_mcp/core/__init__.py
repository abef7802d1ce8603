"""Task lifecycle and view synchronization engine."""

from taskflow_mcp.core.classifier import classify, count_tasks, filter_view, is_inbox_task
from taskflow_mcp.core.completion import CompletionStateMachine, state_of
from taskflow_mcp.core.counts import CountSynchronizer
from taskflow_mcp.core.dates import format_local_date, local_today, parse_local_date, start_of_week, upcoming_window
from taskflow_mcp.core.events import EventBus
from taskflow_mcp.core.recurrence import advance, is_repeating, normalize_frequency
from taskflow_mcp.core.sections import COMPLETED_SECTION_NAME, CompletedScope, SectionResolver
from taskflow_mcp.core.stores import NotifyingTaskStore, SectionStore, TaskStore

__all__ = [
    # Dates
    "local_today",
    "parse_local_date",
    "format_local_date",
    "start_of_week",
    "upcoming_window",
    # Classification
    "classify",
    "filter_view",
    "count_tasks",
    "is_inbox_task",
    # Recurrence
    "advance",
    "is_repeating",
    "normalize_frequency",
    # Sections
    "COMPLETED_SECTION_NAME",
    "CompletedScope",
    "SectionResolver",
    # Lifecycle
    "CompletionStateMachine",
    "state_of",
    # Events and stores
    "EventBus",
    "NotifyingTaskStore",
    "TaskStore",
    "SectionStore",
    # Counts
    "CountSynchronizer",
]
