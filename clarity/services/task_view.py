"""
Task view model.

Pure functions that turn the raw task collection into what the user
sees: filtered, sorted, and annotated with a due status. Nothing here
is stored or mutates its input.
"""

from datetime import date, timedelta
from typing import Any, Iterable, List, Optional

from clarity.core.enums import DueStatus, TaskFilter, TaskSort
from clarity.schemas.task import TaskRead
from clarity.schemas.view import AnnotatedTask, EmptyState, TaskStats, TaskView
from clarity.utils.time import today as current_day

# today .. today + DUE_SOON_DAYS (inclusive) counts as due soon
DUE_SOON_DAYS = 3

_EMPTY_STATES = {
    TaskFilter.ALL: ("No tasks yet", "Add your first task above to get started"),
    TaskFilter.ACTIVE: ("All done!", "No active tasks remaining"),
    TaskFilter.COMPLETED: ("No completed tasks", "Complete some tasks to see them here"),
}


def _as_task(task: Any) -> TaskRead:
    if isinstance(task, TaskRead):
        return task
    return TaskRead.model_validate(task)


def due_status(task: TaskRead, today: date) -> DueStatus:
    if task.due_date is None or task.completed:
        return DueStatus.NONE
    if task.due_date < today:
        return DueStatus.OVERDUE
    if task.due_date <= today + timedelta(days=DUE_SOON_DAYS):
        return DueStatus.DUE_SOON
    return DueStatus.OK


def filter_tasks(tasks: Iterable[TaskRead], task_filter: TaskFilter) -> List[TaskRead]:
    if task_filter is TaskFilter.ACTIVE:
        return [t for t in tasks if not t.completed]
    if task_filter is TaskFilter.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)


def sort_tasks(tasks: Iterable[TaskRead], task_sort: TaskSort) -> List[TaskRead]:
    if task_sort is TaskSort.DUE:
        # sorted() is stable, so equal dates keep their incoming order
        return sorted(tasks, key=lambda t: (t.due_date is None, t.due_date or date.min))
    return list(tasks)


def derive_view(
    tasks: Iterable[Any],
    task_filter: TaskFilter = TaskFilter.ALL,
    task_sort: TaskSort = TaskSort.CREATED,
    today: Optional[date] = None,
) -> List[AnnotatedTask]:
    """
    Filter, sort and annotate ``tasks``.

    ``tasks`` may hold ORM rows, TaskRead objects or plain dicts, in the
    order the store returned them (newest first). ``created`` keeps that
    order; ``due`` orders by due date ascending with undated tasks last.
    """
    task_filter = TaskFilter(task_filter)
    task_sort = TaskSort(task_sort)
    today = today or current_day()

    visible = sort_tasks(filter_tasks([_as_task(t) for t in tasks], task_filter), task_sort)
    return [
        AnnotatedTask(**task.model_dump(), due_status=due_status(task, today))
        for task in visible
    ]


def task_stats(tasks: Iterable[Any]) -> TaskStats:
    items = [_as_task(t) for t in tasks]
    completed = sum(1 for t in items if t.completed)
    return TaskStats(
        total=len(items),
        active=len(items) - completed,
        completed=completed,
        can_clear_completed=completed > 0,
    )


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def count_label(stats: TaskStats, task_filter: TaskFilter = TaskFilter.ALL) -> str:
    """The counter under the list, worded for the active filter."""
    task_filter = TaskFilter(task_filter)
    if task_filter is TaskFilter.ACTIVE:
        return _plural(stats.active, "active task")
    if task_filter is TaskFilter.COMPLETED:
        return _plural(stats.completed, "completed task")
    return _plural(stats.total, "task")


def empty_state(task_filter: TaskFilter = TaskFilter.ALL) -> EmptyState:
    title, message = _EMPTY_STATES[TaskFilter(task_filter)]
    return EmptyState(title=title, message=message)


def build_task_view(
    tasks: Iterable[Any],
    task_filter: TaskFilter = TaskFilter.ALL,
    task_sort: TaskSort = TaskSort.CREATED,
    today: Optional[date] = None,
) -> TaskView:
    """Bundle the derived list with the counters and empty-state copy."""
    items = [_as_task(t) for t in tasks]
    stats = task_stats(items)
    return TaskView(
        filter=TaskFilter(task_filter),
        sort=TaskSort(task_sort),
        items=derive_view(items, task_filter, task_sort, today=today),
        stats=stats,
        count_label=count_label(stats, task_filter),
        empty_state=empty_state(task_filter),
    )
