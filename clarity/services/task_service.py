"""
Task business logic service.

Owns the rules the repository does not know about: the recurrence
invariant on updates, spawning the next occurrence when a recurring
task is completed, and deleting a whole series.
"""

import logging
from datetime import date
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Set, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from clarity.core.enums import DeleteScope
from clarity.errors import TaskNotFound, ValidationFailed
from clarity.models.task import Task
from clarity.repositories.task_repository import TaskRepository
from clarity.schemas.task import TaskCreate, TaskUpdate, check_recurrence
from clarity.services.recurrence import (
    InvalidRecurrencePattern,
    build_next_occurrence,
    should_spawn_successor,
)

logger = logging.getLogger(__name__)

_SNAPSHOT_FIELDS = (
    "id",
    "user_id",
    "text",
    "completed",
    "due_date",
    "is_recurring",
    "recurrence_pattern",
    "parent_task_id",
    "series_id",
)


class TaskService:
    """Service for task business logic."""

    def __init__(self, db: AsyncSession):
        self.repository = TaskRepository(db)

    async def list_tasks(self, user_id: UUID) -> List[Task]:
        """List the caller's tasks, newest first."""
        return await self.repository.list(user_id)

    async def create_task(self, user_id: UUID, data: TaskCreate) -> Task:
        """Create a new task."""
        task = await self.repository.create(user_id, data)
        logger.info("Created task %s for user %s", task.id, user_id)
        return task

    async def update_task(
        self,
        user_id: UUID,
        task_id: UUID,
        data: TaskUpdate,
        today: Optional[date] = None,
    ) -> Tuple[Task, Optional[Task]]:
        """
        Apply a partial update.

        Returns the updated task and, when the update completed a
        recurring task, the occurrence that was generated for it. All
        validation happens before the first write.

        Raises:
            TaskNotFound: no such task for this user
            ValidationFailed: the merged task would break the recurrence rule
        """
        task = await self.repository.get_by_id(user_id, task_id)
        if task is None:
            raise TaskNotFound(task_id)

        changes = self._normalize_changes(task, data)

        successor_fields = None
        if should_spawn_successor(
            was_completed=task.completed,
            is_completed=changes.get("completed", task.completed),
            is_recurring=changes.get("is_recurring", task.is_recurring),
            recurrence_pattern=changes.get("recurrence_pattern", task.recurrence_pattern),
        ):
            merged = self._snapshot(task, changes)
            series_root = None
            if task.series_id is None and task.parent_task_id is not None:
                series_root = await self.resolve_series_root(user_id, task)
            try:
                successor_fields = build_next_occurrence(merged, today=today, series_id=series_root)
            except InvalidRecurrencePattern as exc:
                raise ValidationFailed(str(exc), {"recurrence_pattern": str(exc.pattern)}) from exc

        task = await self.repository.apply_changes(task, changes)

        successor = None
        if successor_fields is not None:
            successor = await self.repository.create_from_fields(successor_fields)
            logger.info(
                "Completed recurring task %s, next occurrence %s due %s",
                task.id,
                successor.id,
                successor.due_date,
            )

        return task, successor

    async def delete_task(
        self,
        user_id: UUID,
        task_id: UUID,
        scope: DeleteScope = DeleteScope.SINGLE,
    ) -> int:
        """
        Delete one task or its whole series. Returns the number of rows
        removed; 0 means the task does not exist for this user.
        """
        if scope is DeleteScope.SINGLE:
            deleted = await self.repository.delete_by_ids(user_id, [task_id])
            logger.info("Deleted task %s for user %s (%d row)", task_id, user_id, deleted)
            return deleted

        task = await self.repository.get_by_id(user_id, task_id)
        if task is None:
            return 0

        root_id = await self.resolve_series_root(user_id, task)
        series_ids = await self.collect_series(user_id, root_id)
        series_ids.add(task.id)

        deleted = await self.repository.delete_by_ids(user_id, series_ids)
        logger.info("Deleted series %s for user %s (%d rows)", root_id, user_id, deleted)
        return deleted

    async def clear_completed(self, user_id: UUID) -> int:
        """Delete every completed task of the caller."""
        deleted = await self.repository.delete_completed(user_id)
        logger.info("Cleared %d completed tasks for user %s", deleted, user_id)
        return deleted

    async def resolve_series_root(self, user_id: UUID, task: Task) -> UUID:
        """
        Id of the first task of the series ``task`` belongs to.

        Uses the stamped series_id when present, otherwise walks
        parent links upward. A parent that can no longer be loaded is
        still treated as the root so its other children are found.
        """
        if task.series_id is not None:
            return task.series_id

        current = task
        seen = {task.id}
        while current.parent_task_id is not None and current.parent_task_id not in seen:
            parent = await self.repository.get_by_id(user_id, current.parent_task_id)
            if parent is None:
                return current.parent_task_id
            if parent.series_id is not None:
                return parent.series_id
            seen.add(parent.id)
            current = parent
        return current.id

    async def collect_series(self, user_id: UUID, root_id: UUID) -> Set[UUID]:
        """The root, every task stamped with it, and everything generated from those."""
        members = {root_id}
        members |= await self.repository.series_member_ids(user_id, root_id)

        frontier = set(members)
        while frontier:
            children = await self.repository.child_ids(user_id, frontier)
            frontier = children - members
            members |= frontier
        return members

    @staticmethod
    def _normalize_changes(task: Task, data: TaskUpdate) -> Dict[str, Any]:
        changes = data.model_dump(exclude_unset=True)
        if changes.get("recurrence_pattern") is not None:
            changes["recurrence_pattern"] = changes["recurrence_pattern"].value

        is_recurring = changes.get("is_recurring", task.is_recurring)
        if not is_recurring and "recurrence_pattern" not in changes:
            # Turning recurrence off drops the pattern along with it
            if task.recurrence_pattern is not None:
                changes["recurrence_pattern"] = None

        pattern = changes.get("recurrence_pattern", task.recurrence_pattern)
        try:
            check_recurrence(is_recurring, pattern)
        except ValueError as exc:
            raise ValidationFailed(str(exc)) from exc
        return changes

    @staticmethod
    def _snapshot(task: Task, changes: Dict[str, Any]) -> SimpleNamespace:
        values = {field: getattr(task, field) for field in _SNAPSHOT_FIELDS}
        values.update(changes)
        return SimpleNamespace(**values)
