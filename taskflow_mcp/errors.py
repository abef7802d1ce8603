"""Error types raised by the task lifecycle engine."""

from __future__ import annotations


class TaskflowError(RuntimeError):
    """Base class for every error raised by taskflow_mcp."""


class StoreError(TaskflowError):
    """A query or mutation against the task/section store failed."""

    def __init__(self, operation: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.status_code = status_code


class UnknownFrequencyError(TaskflowError, ValueError):
    """A repeat frequency outside the recognized set was supplied."""

    def __init__(self, frequency: object) -> None:
        super().__init__(f"Unknown repeat frequency: {frequency!r}")
        self.frequency = frequency


class InvalidTransitionError(TaskflowError):
    """The requested completion transition is not allowed from the task's state."""

    def __init__(self, task_id: str, state: str, transition: str) -> None:
        super().__init__(f"Cannot {transition} task {task_id} in state '{state}'")
        self.task_id = task_id
        self.state = state
        self.transition = transition


class ChannelError(TaskflowError):
    """The live count channel failed to open or delivered a malformed frame."""


class ChannelClosed(ChannelError):
    """The live count channel closed."""

    NORMAL_CLOSURE = 1000
    ABNORMAL_CLOSURE = 1006

    def __init__(self, code: int, reason: str = "") -> None:
        super().__init__(f"Channel closed with code {code}: {reason}" if reason else f"Channel closed with code {code}")
        self.code = code
        self.reason = reason

    @property
    def is_normal(self) -> bool:
        return self.code == self.NORMAL_CLOSURE
