"""
Task model.

Represents one to-do item. Recurring tasks form a series: every
occurrence generated on completion points back at the task it came
from (parent_task_id) and at the first task of the series (series_id).
"""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Index, String, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from clarity.models.base_model import OwnerScopedModel

TEXT_MAX_LENGTH = 200


class Task(OwnerScopedModel):
    """
    Task table - one row per occurrence.
    """

    __tablename__ = "tasks"

    text: Mapped[str] = mapped_column(
        String(TEXT_MAX_LENGTH),
        nullable=False,
    )

    completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    due_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
    )

    is_recurring: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    # 'daily', 'weekly', 'monthly', 'yearly'
    recurrence_pattern: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )

    # The occurrence this one was generated from
    parent_task_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("tasks.id", ondelete="SET NULL"),
        nullable=True,
    )

    # First task of the series; null on tasks that were never generated
    series_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )

    __table_args__ = (
        CheckConstraint(
            "(is_recurring AND recurrence_pattern IS NOT NULL) "
            "OR (NOT is_recurring AND recurrence_pattern IS NULL)",
            name="ck_tasks_recurrence_pattern",
        ),
        Index("idx_tasks_completed", "user_id", "completed"),
        Index("idx_tasks_due_date", "user_id", "due_date"),
    )

    def __repr__(self) -> str:
        return f"<Task {self.id} completed={self.completed} pattern={self.recurrence_pattern}>"
