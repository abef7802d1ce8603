"""Tests for view classification and local count recomputation."""

from datetime import date, datetime

from conftest import TODAY, make_task

from taskflow_mcp.core.classifier import classify, count_tasks, filter_view, is_inbox_task
from taskflow_mcp.enums import View, WeekStart
from taskflow_mcp.models.task import TaskCounts


class TestClassifyToday:
    """Tests for Today membership."""

    def test_due_today_is_in_today(self):
        task = make_task(due_date="2025-01-10")
        assert View.TODAY in classify(task, TODAY)

    def test_due_today_as_iso_datetime(self):
        """A datetime due value is reduced to its calendar day."""
        task = make_task(due_date="2025-01-10T21:00:00Z")
        assert View.TODAY in classify(task, TODAY)

    def test_due_tomorrow_is_not_today(self):
        task = make_task(due_date="2025-01-11")
        views = classify(task, TODAY)
        assert View.TODAY not in views
        assert View.UPCOMING in views


class TestClassifyUpcoming:
    """Tests for the current-plus-next-week Upcoming window."""

    def test_window_end_is_included(self):
        assert View.UPCOMING in classify(make_task(due_date="2025-01-18"), TODAY)

    def test_day_after_window_end_is_excluded(self):
        assert View.UPCOMING not in classify(make_task(due_date="2025-01-19"), TODAY)

    def test_window_start_is_included(self):
        """Earlier days of the current week are still in the window."""
        assert View.UPCOMING in classify(make_task(due_date="2025-01-05"), TODAY)

    def test_day_before_window_start_is_excluded(self):
        assert View.UPCOMING not in classify(make_task(due_date="2025-01-04"), TODAY)

    def test_monday_week_start_shifts_window(self):
        task = make_task(due_date="2025-01-19")
        assert View.UPCOMING in classify(task, TODAY, WeekStart.MONDAY)
        assert View.UPCOMING not in classify(make_task(due_date="2025-01-05"), TODAY, WeekStart.MONDAY)


class TestClassifyLocation:
    """Tests for Inbox and Project membership."""

    def test_inbox_regardless_of_date(self):
        assert View.INBOX in classify(make_task(due_date="2030-06-01"), TODAY)

    def test_no_due_date_inbox_task(self):
        """No due date: only location-based views apply."""
        assert classify(make_task(), TODAY) == {View.INBOX}

    def test_no_due_date_project_task(self):
        assert classify(make_task(project_id="7"), TODAY) == {View.PROJECT}

    def test_project_task_due_today_is_in_both(self):
        views = classify(make_task(project_id="7", due_date="2025-01-10"), TODAY)
        assert views == {View.TODAY, View.UPCOMING, View.PROJECT}

    def test_project_task_is_not_in_inbox(self):
        assert View.INBOX not in classify(make_task(project_id=7), TODAY)

    def test_sectioned_task_without_project_is_not_inbox(self):
        task = make_task(section_id="s1", current_view=["today"])
        assert not is_inbox_task(task)

    def test_inbox_section_keeps_task_in_inbox(self):
        task = make_task(section_id="s1", current_view=["inbox"])
        assert View.INBOX in classify(task, TODAY)

    def test_stored_view_tags_do_not_decide_today(self):
        """current_view is advisory; the due date decides."""
        task = make_task(due_date="2025-02-01", current_view=["today"])
        assert View.TODAY not in classify(task, TODAY)


class TestClassifyCompletion:
    """Tests for completed and archived tasks."""

    def test_archived_task_only_in_completed_view(self):
        task = make_task(
            project_id="7",
            due_date="2025-01-10",
            completed=True,
            totally_completed=True,
        )
        assert classify(task, TODAY) == {View.COMPLETED}

    def test_completed_task_stays_in_its_views(self):
        task = make_task(due_date="2025-01-10", completed=True, section_id="s1", current_view=["inbox"])
        assert {View.TODAY, View.INBOX} <= classify(task, TODAY)

    def test_overdue(self):
        assert View.OVERDUE in classify(make_task(due_date="2025-01-09"), TODAY)

    def test_completed_task_is_not_overdue(self):
        assert View.OVERDUE not in classify(make_task(due_date="2025-01-09", completed=True), TODAY)

    def test_due_today_is_not_overdue(self):
        assert View.OVERDUE not in classify(make_task(due_date="2025-01-10"), TODAY)


class TestFilterView:
    """Tests for filter_view."""

    def test_project_view_restricted_to_project(self):
        tasks = [make_task(id="1", project_id="7"), make_task(id="2", project_id="8"), make_task(id="3")]
        selected = filter_view(tasks, View.PROJECT, TODAY, project_id="7")
        assert [t.id for t in selected] == ["1"]

    def test_completed_view_sorted_by_completed_date(self):
        tasks = [
            make_task(id="1", completed=True, totally_completed=True, completed_date=datetime(2025, 1, 2, 9)),
            make_task(id="2", completed=True, totally_completed=True, completed_date=datetime(2025, 1, 8, 9)),
            make_task(id="3", completed=True, totally_completed=True),
            make_task(id="4"),
        ]
        selected = filter_view(tasks, View.COMPLETED, TODAY)
        assert [t.id for t in selected] == ["2", "1", "3"]

    def test_upcoming_sorted_by_due_date(self):
        tasks = [make_task(id="1", due_date="2025-01-15"), make_task(id="2", due_date="2025-01-11")]
        assert [t.id for t in filter_view(tasks, View.UPCOMING, TODAY)] == ["2", "1"]


class TestCountTasks:
    """Tests for recomputing the count aggregate."""

    def test_counts_active_tasks_per_view(self):
        tasks = [
            make_task(id="1", due_date="2025-01-10"),
            make_task(id="2", due_date="2025-01-12", project_id="7"),
            make_task(id="3", project_id="7"),
            make_task(id="4", due_date="2025-01-10", completed=True),
            make_task(id="5", project_id="8", completed=True, totally_completed=True),
        ]
        counts = count_tasks(tasks, TODAY)
        assert counts == TaskCounts(inbox=1, today=1, upcoming=2, completed=1, projects={"7": 2})

    def test_empty_task_set(self):
        assert count_tasks([], date(2025, 1, 10)) == TaskCounts()
