"""
Client view state.

An immutable snapshot of what a client holds: the tasks it has loaded,
the selected filter and sort, and which task is being edited. Every
action returns a new state; ``render`` hands the state to the view
model.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Optional, Set, Tuple
from uuid import UUID

from clarity.core.enums import TaskFilter, TaskSort, Theme
from clarity.schemas.task import TaskRead
from clarity.schemas.view import TaskView
from clarity.services.task_view import build_task_view


@dataclass(frozen=True)
class ViewState:
    tasks: Tuple[TaskRead, ...] = ()
    filter: TaskFilter = TaskFilter.ALL
    sort: TaskSort = TaskSort.CREATED
    editing_id: Optional[UUID] = None

    def tasks_loaded(self, tasks: Iterable[object]) -> "ViewState":
        loaded = tuple(TaskRead.model_validate(t) for t in tasks)
        return replace(self, tasks=loaded, editing_id=None)

    def task_created(self, task: object) -> "ViewState":
        # The server lists newest first
        return replace(self, tasks=(TaskRead.model_validate(task),) + self.tasks)

    def task_updated(self, task: object, successor: Optional[object] = None) -> "ViewState":
        updated = TaskRead.model_validate(task)
        tasks = tuple(updated if t.id == updated.id else t for t in self.tasks)
        if successor is not None:
            tasks = (TaskRead.model_validate(successor),) + tasks
        editing_id = None if self.editing_id == updated.id else self.editing_id
        return replace(self, tasks=tasks, editing_id=editing_id)

    def task_removed(self, task_id: UUID) -> "ViewState":
        return self._without({task_id})

    def series_removed(self, task_id: UUID) -> "ViewState":
        """Drop the series ``task_id`` belongs to, as the server does."""
        by_id = {t.id: t for t in self.tasks}
        target = by_id.get(task_id)
        if target is None:
            return self

        root = target.series_id
        current = target
        seen = {target.id}
        while root is None:
            parent_id = current.parent_task_id
            if parent_id is None or parent_id in seen:
                root = current.id
            elif parent_id not in by_id:
                root = parent_id
            else:
                current = by_id[parent_id]
                seen.add(current.id)
                root = current.series_id

        removed = {task_id, root} | {t.id for t in self.tasks if t.series_id == root}
        frontier = set(removed)
        while frontier:
            frontier = {
                t.id for t in self.tasks
                if t.parent_task_id in frontier and t.id not in removed
            }
            removed |= frontier
        return self._without(removed)

    def completed_cleared(self) -> "ViewState":
        return self._without({t.id for t in self.tasks if t.completed})

    def set_filter(self, task_filter: TaskFilter) -> "ViewState":
        return replace(self, filter=TaskFilter(task_filter))

    def set_sort(self, task_sort: TaskSort) -> "ViewState":
        return replace(self, sort=TaskSort(task_sort))

    def start_editing(self, task_id: UUID) -> "ViewState":
        if not any(t.id == task_id for t in self.tasks):
            return self
        return replace(self, editing_id=task_id)

    def cancel_editing(self) -> "ViewState":
        return replace(self, editing_id=None)

    def render(self, today: Optional[date] = None) -> TaskView:
        return build_task_view(self.tasks, self.filter, self.sort, today=today)

    def _without(self, task_ids: Set[UUID]) -> "ViewState":
        editing_id = None if self.editing_id in task_ids else self.editing_id
        return replace(
            self,
            tasks=tuple(t for t in self.tasks if t.id not in task_ids),
            editing_id=editing_id,
        )


def next_theme(theme: Theme) -> Theme:
    """The theme the toggle switches to."""
    return Theme.LIGHT if Theme(theme) is Theme.DARK else Theme.DARK
