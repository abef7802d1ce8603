"""Tests for Completed-section resolution."""

import asyncio
import logging

import pytest
from conftest import InMemoryStore, make_task

from taskflow_mcp.core.sections import COMPLETED_SECTION_NAME, CompletedScope, SectionResolver
from taskflow_mcp.enums import View
from taskflow_mcp.errors import StoreError
from taskflow_mcp.models.task import SectionModel


class TestCompletedScope:
    """Tests for scope selection."""

    def test_today_context_wins_over_project(self):
        task = make_task(project_id="7")
        assert CompletedScope.for_task(task, View.TODAY) == CompletedScope.today()

    def test_upcoming_context(self):
        assert CompletedScope.for_task(make_task(project_id="7"), View.UPCOMING) == CompletedScope.upcoming()

    def test_project_task_without_view_context(self):
        assert CompletedScope.for_task(make_task(project_id="7"), None) == CompletedScope.project("7")

    def test_inbox_context_with_project_task_uses_project(self):
        assert CompletedScope.for_task(make_task(project_id="7"), View.INBOX) == CompletedScope.project("7")

    def test_project_context_without_project_falls_back_to_inbox(self):
        assert CompletedScope.for_task(make_task(), View.PROJECT) == CompletedScope.inbox()

    def test_context_is_not_rederived_from_due_date(self):
        """A task due today completed from the Inbox goes to the Inbox bucket."""
        task = make_task(due_date="2025-01-10")
        assert CompletedScope.for_task(task, View.INBOX) == CompletedScope.inbox()

    def test_project_scope_requires_id(self):
        with pytest.raises(ValueError):
            CompletedScope(View.PROJECT)

    def test_overdue_has_no_bucket(self):
        with pytest.raises(ValueError):
            CompletedScope(View.OVERDUE)


class TestSectionResolver:
    """Tests for get_or_create_completed_section."""

    @pytest.mark.asyncio
    async def test_creates_today_bucket_when_missing(self, store):
        resolver = SectionResolver(store)
        resolution = await resolver.get_or_create_completed_section(CompletedScope.today())

        assert resolution.created is True
        assert resolution.section.name == COMPLETED_SECTION_NAME
        assert resolution.section.project_id is None
        assert resolution.section.current_view == [View.TODAY]
        assert ("create_section", "Completed", None, [View.TODAY]) in store.calls

    @pytest.mark.asyncio
    async def test_second_call_reuses_bucket(self, store):
        resolver = SectionResolver(store)
        first = await resolver.get_or_create_completed_section(CompletedScope.inbox())
        second = await resolver.get_or_create_completed_section(CompletedScope.inbox())

        assert second.created is False
        assert second.section.id == first.section.id
        assert store.operations().count("create_section") == 1

    @pytest.mark.asyncio
    async def test_project_bucket_is_scoped_to_project(self):
        store = InMemoryStore(
            sections=[
                SectionModel(id="s1", name="Completed", project_id="8"),
                SectionModel(id="s2", name="Doing", project_id="7"),
            ]
        )
        resolver = SectionResolver(store)
        resolution = await resolver.get_or_create_completed_section(CompletedScope.project("7"))

        assert resolution.created is True
        assert resolution.section.project_id == "7"
        assert resolution.section.current_view == []

    @pytest.mark.asyncio
    async def test_view_buckets_are_independent(self):
        store = InMemoryStore(sections=[SectionModel(id="s1", name="Completed", current_view=["today"])])
        resolver = SectionResolver(store)

        today = await resolver.get_or_create_completed_section(CompletedScope.today())
        upcoming = await resolver.get_or_create_completed_section(CompletedScope.upcoming())

        assert today.created is False and today.section.id == "s1"
        assert upcoming.created is True and upcoming.section.id != "s1"

    @pytest.mark.asyncio
    async def test_name_match_is_exact(self):
        store = InMemoryStore(sections=[SectionModel(id="s1", name="completed", current_view=["inbox"])])
        resolution = await SectionResolver(store).get_or_create_completed_section(CompletedScope.inbox())
        assert resolution.created is True

    @pytest.mark.asyncio
    async def test_duplicate_buckets_use_first_and_warn(self, caplog):
        store = InMemoryStore(
            sections=[
                SectionModel(id="s1", name="Completed", current_view=["inbox"]),
                SectionModel(id="s2", name="Completed", current_view=["inbox"]),
            ]
        )
        with caplog.at_level(logging.WARNING):
            resolution = await SectionResolver(store).get_or_create_completed_section(CompletedScope.inbox())
        assert resolution.section.id == "s1"
        assert "Found 2 Completed sections" in caplog.text

    @pytest.mark.asyncio
    async def test_store_error_propagates(self, store):
        store.fail_on.add("create_section")
        with pytest.raises(StoreError):
            await SectionResolver(store).get_or_create_completed_section(CompletedScope.inbox())

    @pytest.mark.asyncio
    async def test_concurrent_calls_can_create_duplicates(self, store):
        """Known limitation: two concurrent first completions both create a bucket."""
        resolver = SectionResolver(store)
        first, second = await asyncio.gather(
            resolver.get_or_create_completed_section(CompletedScope.today()),
            resolver.get_or_create_completed_section(CompletedScope.today()),
        )
        assert first.created and second.created
        assert first.section.id != second.section.id

    @pytest.mark.asyncio
    async def test_serialized_resolver_creates_once(self, store):
        resolver = SectionResolver(store, serialize=True)
        first, second = await asyncio.gather(
            resolver.get_or_create_completed_section(CompletedScope.today()),
            resolver.get_or_create_completed_section(CompletedScope.today()),
        )
        assert [first.created, second.created] == [True, False]
        assert first.section.id == second.section.id
        assert store.operations().count("create_section") == 1
