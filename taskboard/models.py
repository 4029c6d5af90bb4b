"""Pydantic models for the Task Manager API.

Field names are snake_case in Python and camelCase on the wire and on disk.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Annotated

from pydantic import AfterValidator, AwareDatetime, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DESCRIPTION_MAX_LENGTH = 2000


def _require_utc(value: datetime) -> datetime:
    if value.utcoffset() != timedelta(0):
        raise ValueError("dueDate must be an ISO-8601 UTC instant, e.g. 2025-01-31T17:00:00Z")
    return value


# Due dates sent by clients: UTC instants only, as produced by toISOString()
UtcInstant = Annotated[AwareDatetime, AfterValidator(_require_utc)]


class TaskStatus(StrEnum):
    """Workflow state of a task."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskPriority(StrEnum):
    """Relative importance of a task."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Task(_CamelModel):
    """A task item in the task manager."""

    id: str = Field(..., description="Unique identifier for the task")
    title: str = Field(..., min_length=1, description="The task title")
    description: str | None = Field(
        default=None,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Optional free-form details",
    )
    status: TaskStatus = Field(default=TaskStatus.TODO, description="Workflow state")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Priority level")
    due_date: AwareDatetime | None = Field(default=None, description="When the task is due")
    created_at: AwareDatetime = Field(..., description="When the task was created")
    updated_at: AwareDatetime = Field(..., description="When the task was last updated")


class TaskCreate(_CamelModel):
    """Request body for creating a new task."""

    title: str = Field(..., min_length=1, description="The task title (required)")
    description: str | None = Field(
        default=None,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Optional details, at most 2000 characters",
    )
    status: TaskStatus | None = Field(default=None, description="Defaults to todo")
    priority: TaskPriority | None = Field(default=None, description="Defaults to medium")
    due_date: UtcInstant | None = Field(
        default=None,
        description="ISO-8601 instant, e.g. 2025-01-31T17:00:00Z",
    )


@dataclass(frozen=True)
class Unchanged:
    """Leave the existing due date as it is."""


@dataclass(frozen=True)
class Cleared:
    """Remove the due date."""


@dataclass(frozen=True)
class SetDueDate:
    """Replace the due date with ``value``."""

    value: datetime


DueDateChange = Unchanged | Cleared | SetDueDate


class TaskUpdate(_CamelModel):
    """Request body for updating an existing task.

    Every field is optional. ``dueDate`` distinguishes three cases: omitted
    (keep), explicit ``null`` (clear), or a value (replace). Use
    :attr:`due_date_change` rather than reading ``due_date`` directly.
    """

    title: str | None = Field(default=None, min_length=1, description="New title")
    description: str | None = Field(
        default=None,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="New description; blank or null clears it",
    )
    status: TaskStatus | None = Field(default=None, description="New status")
    priority: TaskPriority | None = Field(default=None, description="New priority")
    due_date: UtcInstant | None = Field(
        default=None,
        description="New due date, or null to clear it",
    )

    @property
    def due_date_change(self) -> DueDateChange:
        if "due_date" not in self.model_fields_set:
            return Unchanged()
        if self.due_date is None:
            return Cleared()
        return SetDueDate(self.due_date)


class TaskFilter(BaseModel):
    """Criteria for listing tasks. Absent or blank criteria impose no constraint."""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = None

    @field_validator("status", "priority", "search", mode="before")
    @classmethod
    def _blank_as_absent(cls, value: object) -> object:
        if value == "":
            return None
        return value


class HealthResponse(BaseModel):
    """Response from the health check endpoint."""

    status: str = "ok"


class ErrorResponse(BaseModel):
    """Body returned for not-found and server errors."""

    error: str


class ValidationErrorDetail(BaseModel):
    """One offending field of a rejected request."""

    path: list[str | int]
    message: str


class ValidationErrorResponse(BaseModel):
    """Body returned when a request fails validation."""

    error: str = "ValidationError"
    details: list[ValidationErrorDetail]
