"""HTTP client for the task/section/project store."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx

from taskflow_mcp.enums import Priority, View
from taskflow_mcp.errors import StoreError
from taskflow_mcp.models.task import ProjectModel, SectionModel, TaskCounts, TaskModel
from taskflow_mcp.utils.parsers import (
    _parse_counts,
    _parse_projects,
    _parse_sections,
    _parse_task,
    _parse_tasks,
    _validated,
)

DEFAULT_TIMEOUT = 30.0

# The store's query syntax for "no project".
NULL_PROJECT = "null"


def _to_wire(fields: dict[str, Any]) -> dict[str, Any]:
    """Translate task field names to the store's spelling."""
    wire = dict(fields)
    if "priority" in wire:
        wire["piority"] = wire.pop("priority")
    return wire


def _clean_params(params: dict[str, Any]) -> dict[str, str]:
    cleaned: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, date):
            value = value.isoformat()
        elif isinstance(value, (View, Priority)):
            value = value.value
        cleaned[key] = str(value)
    return cleaned


class TaskflowApiClient:
    """
    Async REST client for the external store.

    Every failed request (transport error or non-2xx status) raises
    ``StoreError`` naming the operation. Nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        self._logger = logger or logging.getLogger(__name__)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> TaskflowApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """
        Execute a request and return the decoded JSON body (None when empty).

        Raises:
            StoreError: on transport failures, non-2xx statuses or invalid JSON
        """
        try:
            response = await self._http.request(
                method,
                path.lstrip("/"),
                params=_clean_params(params or {}),
                json=json,
            )
        except httpx.TimeoutException as e:
            raise StoreError(operation, f"Request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise StoreError(operation, f"{type(e).__name__}: {e}") from e

        if response.is_error:
            self._logger.error("%s failed with HTTP %s", operation, response.status_code)
            raise StoreError(
                operation,
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise StoreError(operation, "Response was not valid JSON", status_code=response.status_code) from e

    # ==================================================================
    # Tasks
    # ==================================================================

    async def get_task(self, task_id: str) -> TaskModel:
        data = await self._request("get_task", "GET", f"tasks/{task_id}/")
        return _validated("get_task", _parse_task, data)

    async def create_task(self, fields: dict[str, Any]) -> TaskModel:
        data = await self._request("create_task", "POST", "tasks/", json=_to_wire(fields))
        return _validated("create_task", _parse_task, data)

    async def update_task(self, task_id: str, fields: dict[str, Any]) -> TaskModel:
        data = await self._request("update_task", "PATCH", f"tasks/{task_id}/", json=_to_wire(fields))
        return _validated("update_task", _parse_task, data)

    async def update_completion(self, task_id: str, completed: bool) -> TaskModel:
        data = await self._request(
            "update_completion", "PATCH", f"tasks/{task_id}/completion/", json={"completed": completed}
        )
        return _validated("update_completion", _parse_task, data)

    async def update_total_completion(self, task_id: str, totally_completed: bool) -> TaskModel:
        data = await self._request(
            "update_total_completion",
            "PATCH",
            f"tasks/{task_id}/total_completion/",
            json={"totally_completed": totally_completed},
        )
        return _validated("update_total_completion", _parse_task, data)

    async def move_to_project(self, task_id: str, project_id: str) -> TaskModel:
        data = await self._request(
            "move_to_project", "PATCH", f"tasks/{task_id}/move_to_project/", json={"project_id": project_id}
        )
        return _validated("move_to_project", _parse_task, data)

    async def move_to_section(self, task_id: str, section_id: str) -> TaskModel:
        data = await self._request(
            "move_to_section", "PATCH", f"tasks/{task_id}/move_to_section/", json={"section_id": section_id}
        )
        return _validated("move_to_section", _parse_task, data)

    async def make_unsectioned(self, task_id: str) -> TaskModel:
        data = await self._request("make_unsectioned", "PATCH", f"tasks/{task_id}/make_unsectioned/")
        return _validated("make_unsectioned", _parse_task, data)

    async def update_views(self, task_id: str, views: list[View]) -> TaskModel:
        data = await self._request(
            "update_views",
            "PATCH",
            f"tasks/{task_id}/views/",
            json={"current_view": [View(v).value for v in views]},
        )
        return _validated("update_views", _parse_task, data)

    async def delete_task(self, task_id: str) -> None:
        await self._request("delete_task", "DELETE", f"tasks/{task_id}/")

    async def list_tasks(
        self,
        *,
        project_id: str | None = None,
        view: View | None = None,
        priority: Priority | None = None,
        due_date: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[TaskModel]:
        """
        List tasks using the store's filtered endpoints.

        At most one filter family is used, in this order: view, priority,
        due date, date range, project. No filter lists every task.
        """
        if view is not None:
            path, params = "tasks/by_view/", {"view": view}
        elif priority is not None:
            path, params = "tasks/by_priority/", {"priority": priority}
        elif due_date is not None:
            path, params = "tasks/by_due_date/", {"due_date": due_date}
        elif start_date is not None or end_date is not None:
            if start_date is None or end_date is None:
                raise ValueError("A date range needs both start_date and end_date")
            path, params = "tasks/by_date_range/", {"start_date": start_date, "end_date": end_date}
        else:
            path, params = "tasks/", {"project_id": project_id}
        data = await self._request("list_tasks", "GET", path, params=params)
        return _validated("list_tasks", _parse_tasks, data)

    async def list_overdue_tasks(self, project_id: str | None = None) -> list[TaskModel]:
        data = await self._request("list_overdue_tasks", "GET", "tasks/overdue/", params={"project_id": project_id})
        return _validated("list_overdue_tasks", _parse_tasks, data)

    async def list_completed_tasks(
        self, project_id: str | None = None, section_id: str | None = None
    ) -> list[TaskModel]:
        data = await self._request(
            "list_completed_tasks",
            "GET",
            "tasks/completed/",
            params={"project_id": project_id, "section_id": section_id},
        )
        return _validated("list_completed_tasks", _parse_tasks, data)

    async def get_task_counts(self, today: date) -> TaskCounts:
        """Fetch the aggregate counts for the caller's local ``today``."""
        data = await self._request("get_task_counts", "GET", "tasks/counts/", params={"today_date": today})
        return _validated("get_task_counts", _parse_counts, data or {})

    # ==================================================================
    # Sections
    # ==================================================================

    async def list_sections(self, project_id: str | None = None, view: View | None = None) -> list[SectionModel]:
        params = {"project_id": project_id if project_id is not None else NULL_PROJECT, "current_view": view}
        data = await self._request("list_sections", "GET", "sections/", params=params)
        return _validated("list_sections", _parse_sections, data)

    async def get_section(self, section_id: str) -> SectionModel:
        data = await self._request("get_section", "GET", f"sections/{section_id}/")
        return _validated("get_section", SectionModel.model_validate, data)

    async def create_section(
        self, name: str, project_id: str | None = None, current_view: list[View] | None = None
    ) -> SectionModel:
        body: dict[str, Any] = {"name": name, "project_id": project_id}
        if current_view:
            body["current_view"] = [View(v).value for v in current_view]
        data = await self._request("create_section", "POST", "sections/", json=body)
        return _validated("create_section", SectionModel.model_validate, data)

    async def rename_section(self, section_id: str, name: str) -> SectionModel:
        data = await self._request("rename_section", "PATCH", f"sections/{section_id}/", json={"name": name})
        return _validated("rename_section", SectionModel.model_validate, data)

    async def delete_section(self, section_id: str) -> None:
        await self._request("delete_section", "DELETE", f"sections/{section_id}/")

    async def section_name_exists(self, project_id: str | None, name: str) -> bool:
        data = await self._request(
            "section_name_exists",
            "GET",
            "sections/check_name/",
            params={"project_id": project_id if project_id is not None else NULL_PROJECT, "name": name},
        )
        return bool((data or {}).get("exists"))

    # ==================================================================
    # Projects
    # ==================================================================

    async def list_projects(self) -> list[ProjectModel]:
        data = await self._request("list_projects", "GET", "projects/")
        return _validated("list_projects", _parse_projects, data)

    async def get_project(self, project_id: str) -> ProjectModel:
        data = await self._request("get_project", "GET", f"projects/{project_id}/")
        return _validated("get_project", ProjectModel.model_validate, data)

    async def project_name_exists(self, name: str, parent_id: str | None = None) -> bool:
        data = await self._request(
            "project_name_exists",
            "GET",
            "projects/check_name/",
            params={"name": name, "parent_id": parent_id},
        )
        return bool((data or {}).get("exists"))
