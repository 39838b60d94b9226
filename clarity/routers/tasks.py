"""
Task router - API endpoints for tasks.

Static paths (/view, /completed/all) are registered before the
/{task_id} routes so they are never captured as an id.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from clarity.core.dependencies import get_current_user, get_db
from clarity.core.enums import DeleteScope, TaskFilter, TaskSort
from clarity.errors import TaskNotFound
from clarity.schemas.task import TaskCreate, TaskRead, TaskUpdate
from clarity.schemas.user import CurrentUser
from clarity.schemas.view import TaskView
from clarity.services.task_service import TaskService
from clarity.services.task_view import build_task_view

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskRead])
async def list_tasks(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's tasks, newest first."""
    service = TaskService(db)
    tasks = await service.list_tasks(user.id)
    logger.debug("Found %d tasks for user %s", len(tasks), user.id)
    return tasks


@router.get("/view", response_model=TaskView)
async def view_tasks(
    filter: TaskFilter = Query(TaskFilter.ALL),
    sort: TaskSort = Query(TaskSort.CREATED),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    The caller's tasks filtered, sorted and annotated with due status,
    plus the counters the list footer shows.
    """
    service = TaskService(db)
    tasks = await service.list_tasks(user.id)
    return build_task_view(tasks, filter, sort)


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a new task."""
    service = TaskService(db)
    task = await service.create_task(user.id, data)
    await db.commit()
    return task


@router.delete("/completed/all", status_code=status.HTTP_204_NO_CONTENT)
async def clear_completed(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete every completed task of the caller. Safe to repeat."""
    service = TaskService(db)
    await service.clear_completed(user.id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: UUID,
    data: TaskUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Partially update a task.

    Completing a recurring task also creates its next occurrence in the
    same transaction; the response is the updated task.
    """
    service = TaskService(db)
    task, _successor = await service.update_task(user.id, task_id, data)
    await db.commit()
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: UUID,
    delete_series: bool = Query(False, alias="deleteSeries"),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a task, or with ?deleteSeries=true every task of its series."""
    scope = DeleteScope.SERIES if delete_series else DeleteScope.SINGLE
    service = TaskService(db)
    deleted = await service.delete_task(user.id, task_id, scope)
    if not deleted:
        raise TaskNotFound(task_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
