"""Input models for Taskflow MCP tools."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskflow_mcp.enums import Priority, RepeatFrequency, ResponseFormat, View

# ============================================================================
# Task Input Models
# ============================================================================


class GetTaskInput(BaseModel):
    """Input model for getting a single task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to retrieve", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown', 'concise' or 'json'",
    )


class ClassifyTaskInput(BaseModel):
    """Input model for classifying a task into views."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to classify", min_length=1)
    today: date | None = Field(default=None, description="Override local 'today' (YYYY-MM-DD)")


class ListViewInput(BaseModel):
    """Input model for listing the tasks of a view."""

    model_config = ConfigDict(str_strip_whitespace=True)

    view: View = Field(..., description="View to list: inbox, today, upcoming, overdue, project or completed")
    project_id: str | None = Field(default=None, description="Project ID (required for the project view)")
    limit: int | None = Field(default=50, description="Maximum number of tasks to return", ge=1, le=500)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown', 'concise' or 'json'",
    )

    @field_validator("view")
    @classmethod
    def validate_view(cls, v: View) -> View:
        if v == View.CALENDAR:
            raise ValueError("The calendar view is not listable")
        return v


class CompleteTaskInput(BaseModel):
    """Input model for completing a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to complete", min_length=1)
    view_context: View | None = Field(
        default=None,
        description="View the task is being completed from (today, upcoming, project or inbox)",
    )


class UncompleteTaskInput(BaseModel):
    """Input model for undoing a completion."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to mark as not completed", min_length=1)


class ArchiveTaskInput(BaseModel):
    """Input model for sending a completed task to the completed list."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to archive", min_length=1)


class CreateTaskInput(BaseModel):
    """Input model for creating a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., description="Task name (required)", min_length=1, max_length=500)
    description: str | None = Field(default=None, description="Longer description")
    due_date: date | None = Field(default=None, description="Due date (YYYY-MM-DD)")
    priority: Priority = Field(default=Priority.MEDIUM, description="low, medium, high, urgent or emergency")
    repeat: RepeatFrequency = Field(default=RepeatFrequency.NONE, description="Repeat frequency")
    duration_in_minutes: int = Field(default=15, ge=1, le=24 * 60)
    project_id: str | None = Field(default=None, description="Project ID; omit for Inbox")
    section_id: str | None = Field(default=None, description="Section ID inside the project or view")
    current_view: list[View] = Field(default_factory=list, description="View tags assigned at creation")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class UpdateTaskInput(BaseModel):
    """Input model for updating task fields."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to update", min_length=1)
    name: str | None = Field(default=None, description="New name")
    description: str | None = Field(default=None, description="New description")
    due_date: date | None = Field(default=None, description="New due date (YYYY-MM-DD)")
    clear_due_date: bool = Field(default=False, description="Remove the due date")
    priority: Priority | None = Field(default=None, description="New priority")
    repeat: RepeatFrequency | None = Field(default=None, description="New repeat frequency")

    def changes(self) -> dict:
        """Return only the fields the caller asked to change."""
        fields = self.model_dump(
            exclude={"task_id", "clear_due_date"},
            exclude_none=True,
            mode="json",
        )
        if self.clear_due_date:
            fields["due_date"] = None
        return fields


class DeleteTaskInput(BaseModel):
    """Input model for deleting a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to delete", min_length=1)


class CountsInput(BaseModel):
    """Input model for reading task counts."""

    refresh: bool = Field(default=False, description="Pull a fresh snapshot before answering")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown', 'concise' or 'json'",
    )
