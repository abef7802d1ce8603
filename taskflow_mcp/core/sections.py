"""Find or lazily create the "Completed" bucket for a scope."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from taskflow_mcp.core.stores import SectionStore
from taskflow_mcp.enums import View
from taskflow_mcp.models.results import SectionResolution
from taskflow_mcp.models.task import TaskModel

COMPLETED_SECTION_NAME = "Completed"

_VIEW_SCOPES = (View.INBOX, View.TODAY, View.UPCOMING)


@dataclass(frozen=True)
class CompletedScope:
    """The (view, project) pair a Completed bucket belongs to."""

    view: View
    project_id: str | None = None

    def __post_init__(self) -> None:
        if self.view == View.PROJECT:
            if not self.project_id:
                raise ValueError("A project scope needs a project_id")
        elif self.view in _VIEW_SCOPES:
            if self.project_id is not None:
                raise ValueError(f"The {self.view.value} scope cannot carry a project_id")
        else:
            raise ValueError(f"No Completed bucket exists for the {self.view.value} view")

    @classmethod
    def inbox(cls) -> CompletedScope:
        return cls(View.INBOX)

    @classmethod
    def today(cls) -> CompletedScope:
        return cls(View.TODAY)

    @classmethod
    def upcoming(cls) -> CompletedScope:
        return cls(View.UPCOMING)

    @classmethod
    def project(cls, project_id: str) -> CompletedScope:
        return cls(View.PROJECT, project_id)

    @classmethod
    def for_task(cls, task: TaskModel, view_context: View | None) -> CompletedScope:
        """
        Pick the scope for completing ``task`` from ``view_context``.

        Precedence: Today, Upcoming, the task's project, Inbox. The context is
        taken from the caller as-is; it is not re-derived from the due date.
        """
        if view_context == View.TODAY:
            return cls.today()
        if view_context == View.UPCOMING:
            return cls.upcoming()
        if task.project_id:
            return cls.project(task.project_id)
        return cls.inbox()

    @property
    def label(self) -> str:
        if self.view == View.PROJECT:
            return f"project:{self.project_id}"
        return self.view.value


class SectionResolver:
    """
    Get-or-create for "Completed" sections.

    Two concurrent calls for the same scope may both miss the lookup and
    both create a bucket. With ``serialize=True`` calls for the same scope
    inside this process are queued on a lock, so they share one bucket;
    other processes can still race.
    """

    def __init__(
        self,
        store: SectionStore,
        *,
        serialize: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._serialize = serialize
        self._locks: dict[CompletedScope, asyncio.Lock] = {}
        self._logger = logger or logging.getLogger(__name__)

    async def get_or_create_completed_section(self, scope: CompletedScope) -> SectionResolution:
        if not self._serialize:
            return await self._get_or_create(scope)
        lock = self._locks.setdefault(scope, asyncio.Lock())
        async with lock:
            return await self._get_or_create(scope)

    async def _get_or_create(self, scope: CompletedScope) -> SectionResolution:
        if scope.view == View.PROJECT:
            sections = await self._store.list_sections(project_id=scope.project_id)
        else:
            sections = await self._store.list_sections(project_id=None, view=scope.view)

        matches = [s for s in sections if s.name == COMPLETED_SECTION_NAME]
        if matches:
            if len(matches) > 1:
                self._logger.warning(
                    "Found %d Completed sections in scope %s; using %s",
                    len(matches),
                    scope.label,
                    matches[0].id,
                )
            return SectionResolution(section=matches[0], created=False)

        if scope.view == View.PROJECT:
            section = await self._store.create_section(COMPLETED_SECTION_NAME, project_id=scope.project_id)
        else:
            section = await self._store.create_section(
                COMPLETED_SECTION_NAME, project_id=None, current_view=[scope.view]
            )
        self._logger.info("Created Completed section %s in scope %s", section.id, scope.label)
        return SectionResolution(section=section, created=True)
