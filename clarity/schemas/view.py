"""
Schemas for the derived task view.

These are presentation-only and never stored.
"""

from typing import List

from pydantic import BaseModel

from clarity.core.enums import DueStatus, TaskFilter, TaskSort
from clarity.schemas.task import TaskRead


class AnnotatedTask(TaskRead):
    """A task plus its derived due status."""

    due_status: DueStatus


class TaskStats(BaseModel):
    total: int
    active: int
    completed: int
    can_clear_completed: bool


class EmptyState(BaseModel):
    title: str
    message: str


class TaskView(BaseModel):
    """Everything the client needs to draw the list."""

    filter: TaskFilter
    sort: TaskSort
    items: List[AnnotatedTask]
    stats: TaskStats
    count_label: str
    empty_state: EmptyState
