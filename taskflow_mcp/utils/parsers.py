"""Parser helpers for store responses."""

from typing import Any

from pydantic import ValidationError

from taskflow_mcp.errors import StoreError
from taskflow_mcp.models.task import ProjectModel, SectionModel, TaskCounts, TaskModel


def _unwrap_results(payload: Any) -> list[dict[str, Any]]:
    """
    Return the item list of a list response.

    The store answers list queries either with a bare JSON array or with a
    paginated envelope ``{"results": [...]}``.
    """
    if isinstance(payload, dict) and "results" in payload:
        payload = payload["results"]
    if not isinstance(payload, list):
        return []
    return [item for item in payload if isinstance(item, dict)]


def _parse_task(task_dict: dict[str, Any]) -> TaskModel:
    """
    Parse a task dictionary into a TaskModel.

    Args:
        task_dict: Dictionary from the store's JSON response

    Returns:
        TaskModel instance with validated data
    """
    return TaskModel.model_validate(task_dict)


def _parse_tasks(payload: Any) -> list[TaskModel]:
    """Parse a (possibly paginated) task list response."""
    return [TaskModel.model_validate(t) for t in _unwrap_results(payload)]


def _parse_sections(payload: Any) -> list[SectionModel]:
    """Parse a (possibly paginated) section list response."""
    return [SectionModel.model_validate(s) for s in _unwrap_results(payload)]


def _parse_projects(payload: Any) -> list[ProjectModel]:
    return [ProjectModel.model_validate(p) for p in _unwrap_results(payload)]


def _parse_counts(payload: Any) -> TaskCounts:
    return TaskCounts.model_validate(payload)


def _validated(operation: str, parser, payload: Any):
    """Run ``parser`` and report schema mismatches as store errors."""
    try:
        return parser(payload)
    except ValidationError as e:
        raise StoreError(operation, f"Unexpected response shape: {e.error_count()} validation error(s)") from e
