"""Next-occurrence date arithmetic and successor construction."""

import uuid
from datetime import date
from types import SimpleNamespace

import pytest

from clarity.core.enums import RecurrencePattern
from clarity.services.recurrence import (
    InvalidRecurrencePattern,
    build_next_occurrence,
    compute_next_occurrence,
    should_spawn_successor,
)

pytestmark = pytest.mark.unit


def test_daily_walks_through_leap_day():
    first = compute_next_occurrence(date(2024, 2, 28), RecurrencePattern.DAILY)
    second = compute_next_occurrence(first, RecurrencePattern.DAILY)
    assert first == date(2024, 2, 29)
    assert second == date(2024, 3, 1)


def test_daily_skips_leap_day_in_common_year():
    assert compute_next_occurrence(date(2023, 2, 28), "daily") == date(2023, 3, 1)


def test_weekly_adds_seven_days_across_year_end():
    assert compute_next_occurrence(date(2024, 12, 28), "weekly") == date(2025, 1, 4)


@pytest.mark.parametrize(
    "start, expected",
    [
        (date(2024, 1, 15), date(2024, 2, 15)),
        (date(2024, 1, 31), date(2024, 2, 29)),
        (date(2023, 1, 31), date(2023, 2, 28)),
        (date(2024, 3, 31), date(2024, 4, 30)),
        (date(2024, 12, 31), date(2025, 1, 31)),
    ],
)
def test_monthly_uses_calendar_months(start, expected):
    assert compute_next_occurrence(start, RecurrencePattern.MONTHLY) == expected


def test_yearly_from_leap_day_clamps_to_feb_28():
    assert compute_next_occurrence(date(2024, 2, 29), "yearly") == date(2025, 2, 28)
    assert compute_next_occurrence(date(2023, 6, 1), "yearly") == date(2024, 6, 1)


@pytest.mark.parametrize("pattern", list(RecurrencePattern))
def test_next_occurrence_is_always_later(pattern):
    for start in (date(2024, 1, 31), date(2024, 2, 29), date(2025, 12, 31)):
        assert compute_next_occurrence(start, pattern) > start


def test_missing_due_date_uses_today():
    today = date(2026, 10, 18)
    assert compute_next_occurrence(None, "daily", today=today) == date(2026, 10, 19)
    assert compute_next_occurrence(None, "monthly", today=today) == date(2026, 11, 18)


@pytest.mark.parametrize("pattern", ["hourly", "", None, "Daily"])
def test_unknown_pattern_is_rejected(pattern):
    with pytest.raises(InvalidRecurrencePattern):
        compute_next_occurrence(date(2024, 1, 1), pattern)


def test_only_false_to_true_on_recurring_task_spawns():
    assert should_spawn_successor(False, True, True, "daily")
    assert not should_spawn_successor(False, True, False, None)
    assert not should_spawn_successor(True, False, True, "daily")
    assert not should_spawn_successor(True, True, True, "daily")
    assert not should_spawn_successor(False, False, True, "daily")
    assert not should_spawn_successor(False, True, True, None)


def _task(**overrides):
    values = dict(
        id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        text="Water plants",
        completed=True,
        due_date=date(2024, 5, 1),
        is_recurring=True,
        recurrence_pattern="weekly",
        parent_task_id=None,
        series_id=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_successor_of_series_root_points_back_at_it():
    root = _task()
    successor = build_next_occurrence(root)

    assert successor["parent_task_id"] == root.id
    assert successor["series_id"] == root.id
    assert successor["user_id"] == root.user_id
    assert successor["text"] == "Water plants"
    assert successor["completed"] is False
    assert successor["is_recurring"] is True
    assert successor["recurrence_pattern"] == "weekly"
    assert successor["due_date"] == date(2024, 5, 8)


def test_successor_chains_to_immediate_predecessor():
    root_id = uuid.uuid4()
    middle = _task(parent_task_id=root_id, series_id=root_id)
    successor = build_next_occurrence(middle)

    assert successor["parent_task_id"] == middle.id
    assert successor["series_id"] == root_id


def test_successor_uses_resolved_series_root():
    resolved = uuid.uuid4()
    legacy = _task(parent_task_id=uuid.uuid4())
    assert build_next_occurrence(legacy, series_id=resolved)["series_id"] == resolved


def test_successor_rejects_stored_garbage_pattern():
    with pytest.raises(InvalidRecurrencePattern):
        build_next_occurrence(_task(recurrence_pattern="fortnightly"))
