"""
Recurrence engine.

Works out when the next occurrence of a recurring task is due and what
the successor row looks like. Nothing here touches the database; the
task service decides when to call it and persists the result.
"""

import calendar
from datetime import date, timedelta
from typing import Any, Dict, Optional, Union
from uuid import UUID

from clarity.core.enums import RecurrencePattern
from clarity.utils.time import today as current_day


class InvalidRecurrencePattern(ValueError):
    """Raised for a pattern outside daily/weekly/monthly/yearly."""

    def __init__(self, pattern: Any):
        super().__init__(f"Invalid recurrence pattern: {pattern!r}")
        self.pattern = pattern


def parse_pattern(pattern: Union[RecurrencePattern, str, None]) -> RecurrencePattern:
    if isinstance(pattern, RecurrencePattern):
        return pattern
    try:
        return RecurrencePattern(pattern)
    except ValueError:
        raise InvalidRecurrencePattern(pattern) from None


def add_months(basis: date, months: int) -> date:
    """Calendar month addition, clamping to the last day of the target month."""
    month_index = basis.month - 1 + months
    year = basis.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(basis.day, last_day))


def compute_next_occurrence(
    current_due_date: Optional[date],
    pattern: Union[RecurrencePattern, str],
    today: Optional[date] = None,
) -> date:
    """
    Return the due date of the occurrence after ``current_due_date``.

    Without a due date the basis is today. One unit of the pattern is
    added: a day, seven days, a calendar month or a calendar year.
    Feb 29 + 1 year lands on Feb 28, Jan 31 + 1 month on the last day
    of February.

    Raises:
        InvalidRecurrencePattern: pattern is not one of the four values
    """
    recurrence = parse_pattern(pattern)
    basis = current_due_date or today or current_day()

    if recurrence is RecurrencePattern.DAILY:
        return basis + timedelta(days=1)
    if recurrence is RecurrencePattern.WEEKLY:
        return basis + timedelta(days=7)
    if recurrence is RecurrencePattern.MONTHLY:
        return add_months(basis, 1)
    return add_months(basis, 12)


def should_spawn_successor(
    was_completed: bool,
    is_completed: bool,
    is_recurring: bool,
    recurrence_pattern: Optional[str],
) -> bool:
    """Only a false -> true completion of a recurring task spawns a successor."""
    return (
        not was_completed
        and is_completed
        and is_recurring
        and recurrence_pattern is not None
    )


def build_next_occurrence(
    task: Any,
    today: Optional[date] = None,
    series_id: Optional[UUID] = None,
) -> Dict[str, Any]:
    """
    Field values for the task that follows ``task`` in its series.

    The successor points at ``task`` itself (a chain, not a star) and
    carries the series root forward so the whole series can be found
    without walking the chain. Pass ``series_id`` when the root of an
    older chain has already been resolved by walking parent links.
    """
    next_due = compute_next_occurrence(task.due_date, task.recurrence_pattern, today=today)
    return {
        "user_id": task.user_id,
        "text": task.text,
        "completed": False,
        "due_date": next_due,
        "is_recurring": task.is_recurring,
        "recurrence_pattern": parse_pattern(task.recurrence_pattern).value,
        "parent_task_id": task.id,
        "series_id": series_id or task.series_id or task.parent_task_id or task.id,
    }
