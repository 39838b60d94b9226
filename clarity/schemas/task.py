"""
Task Pydantic schemas.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from clarity.core.enums import RecurrencePattern
from clarity.models.task import TEXT_MAX_LENGTH
from clarity.schemas.base import OwnerScopedRead


def clean_task_text(value: object) -> str:
    """Trim task text and enforce the 1-200 character rule."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Task text is required")
    text = value.strip()
    if len(text) > TEXT_MAX_LENGTH:
        raise ValueError(f"Task text must be {TEXT_MAX_LENGTH} characters or less")
    return text


def check_recurrence(is_recurring: bool, pattern: Optional[RecurrencePattern]) -> None:
    """A pattern exists exactly when the task recurs."""
    if is_recurring and pattern is None:
        raise ValueError("recurrence_pattern is required when is_recurring is true")
    if not is_recurring and pattern is not None:
        raise ValueError("recurrence_pattern is only allowed when is_recurring is true")


class TaskCreate(BaseModel):
    """Schema for creating a new task."""

    text: str
    due_date: Optional[date] = None
    is_recurring: bool = False
    recurrence_pattern: Optional[RecurrencePattern] = None

    @field_validator("text", mode="before")
    @classmethod
    def validate_text(cls, value: object) -> str:
        return clean_task_text(value)

    @model_validator(mode="after")
    def validate_recurrence(self) -> "TaskCreate":
        check_recurrence(self.is_recurring, self.recurrence_pattern)
        return self


class TaskUpdate(BaseModel):
    """
    Schema for a partial task update. Only fields present in the body
    are applied; ``due_date`` and ``recurrence_pattern`` may be sent as
    null to clear them.
    """

    text: Optional[str] = None
    completed: Optional[bool] = None
    due_date: Optional[date] = None
    is_recurring: Optional[bool] = None
    recurrence_pattern: Optional[RecurrencePattern] = None

    @field_validator("text", mode="before")
    @classmethod
    def validate_text(cls, value: object) -> str:
        if value is None:
            raise ValueError("Task text cannot be empty")
        return clean_task_text(value)

    @field_validator("completed", "is_recurring", mode="before")
    @classmethod
    def reject_null_flags(cls, value: object) -> object:
        if value is None:
            raise ValueError("value must be true or false")
        return value

    @model_validator(mode="after")
    def require_some_field(self) -> "TaskUpdate":
        if not self.model_fields_set:
            raise ValueError("No valid fields to update")
        return self


class TaskRead(OwnerScopedRead):
    """Schema for reading task data (API response)."""

    text: str
    completed: bool
    due_date: Optional[date] = None
    is_recurring: bool
    recurrence_pattern: Optional[str] = None
    parent_task_id: Optional[UUID] = None
    series_id: Optional[UUID] = None
