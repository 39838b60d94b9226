"""
Task repository - database operations for Task.

Every query is filtered by ``user_id``; a task owned by somebody else
behaves exactly like a task that does not exist.
"""

from typing import Any, Dict, Iterable, List, Optional, Set
from uuid import UUID
import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from clarity.models.task import Task
from clarity.schemas.task import TaskCreate


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, user_id: UUID) -> List[Task]:
        """List a user's tasks, newest first."""
        query = (
            select(Task)
            .where(Task.user_id == user_id)
            .order_by(Task.created_at.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, user_id: UUID, task_id: UUID) -> Optional[Task]:
        """Get a task by ID for a specific owner."""
        result = await self.db.execute(
            select(Task).where(
                Task.id == task_id,
                Task.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: UUID, data: TaskCreate) -> Task:
        """Create a new task from validated input."""
        values = data.model_dump()
        if values.get("recurrence_pattern") is not None:
            values["recurrence_pattern"] = data.recurrence_pattern.value
        return await self.create_from_fields({"user_id": user_id, **values})

    async def create_from_fields(self, fields: Dict[str, Any]) -> Task:
        """Insert a task from a dict of column values."""
        task = Task(id=uuid.uuid4(), **fields)
        self.db.add(task)
        await self.db.flush()
        await self.db.refresh(task)
        return task

    async def apply_changes(self, task: Task, changes: Dict[str, Any]) -> Task:
        """Write already-validated column values onto a loaded task."""
        for field, value in changes.items():
            setattr(task, field, value)

        task.updated_at = func.now()
        await self.db.flush()
        await self.db.refresh(task)
        return task

    async def series_member_ids(self, user_id: UUID, root_id: UUID) -> Set[UUID]:
        """Ids of tasks stamped with ``root_id`` as their series."""
        result = await self.db.execute(
            select(Task.id).where(
                Task.user_id == user_id,
                Task.series_id == root_id,
            )
        )
        return set(result.scalars().all())

    async def child_ids(self, user_id: UUID, parent_ids: Iterable[UUID]) -> Set[UUID]:
        """Ids of tasks generated directly from any of ``parent_ids``."""
        parent_ids = list(parent_ids)
        if not parent_ids:
            return set()
        result = await self.db.execute(
            select(Task.id).where(
                Task.user_id == user_id,
                Task.parent_task_id.in_(parent_ids),
            )
        )
        return set(result.scalars().all())

    async def delete_by_ids(self, user_id: UUID, task_ids: Iterable[UUID]) -> int:
        """Delete the given tasks if the user owns them. Returns rows deleted."""
        task_ids = list(task_ids)
        if not task_ids:
            return 0
        result = await self.db.execute(
            delete(Task).where(
                Task.user_id == user_id,
                Task.id.in_(task_ids),
            )
        )
        await self.db.flush()
        return result.rowcount or 0

    async def delete_completed(self, user_id: UUID) -> int:
        """Delete every completed task of a user. Returns rows deleted."""
        result = await self.db.execute(
            delete(Task).where(
                Task.user_id == user_id,
                Task.completed.is_(True),
            )
        )
        await self.db.flush()
        return result.rowcount or 0
