"""
Task Routes

CRUD for assignments with deadlines. Subtask endpoints require an active
premium subscription.
"""

import uuid
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from studizen.api.deps import get_current_active_user
from studizen.core.database import get_db
from studizen.models.enums import TaskStatus
from studizen.models.profile import Profile
from studizen.models.task import Subtask
from studizen.schemas.task import (
    SubtaskCreate,
    SubtaskResponse,
    SubtaskUpdate,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from studizen.services import task_service


router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get(
    "",
    response_model=list[TaskResponse],
    summary="List tasks",
)
async def list_tasks(
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    task_status: Annotated[Optional[TaskStatus], Query(alias="status")] = None,
) -> list[TaskResponse]:
    """
    List the user's tasks, earliest deadline first.

    Each task carries `is_overdue`: deadline passed and not completed.
    """
    tasks = await task_service.list_tasks(db, current_user, status=task_status)
    return [task_service.to_response(task) for task in tasks]


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
async def create_task(
    task_data: TaskCreate,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TaskResponse:
    task = await task_service.create_task(db, current_user, task_data)
    return task_service.to_response(task)


@router.patch(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Update a task",
)
async def update_task(
    task_id: uuid.UUID,
    task_data: TaskUpdate,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TaskResponse:
    task = await task_service.update_task(db, current_user, task_id, task_data)
    return task_service.to_response(task)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a task",
)
async def delete_task(
    task_id: uuid.UUID,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await task_service.delete_task(db, current_user, task_id)


# ============== Subtasks (Premium) ==============

@router.get(
    "/{task_id}/subtasks",
    response_model=list[SubtaskResponse],
    summary="List subtasks (Premium)",
)
async def list_subtasks(
    task_id: uuid.UUID,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[Subtask]:
    return await task_service.list_subtasks(db, current_user, task_id)


@router.post(
    "/{task_id}/subtasks",
    response_model=SubtaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a subtask (Premium)",
)
async def create_subtask(
    task_id: uuid.UUID,
    subtask_data: SubtaskCreate,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Subtask:
    """
    Raises:
        PermissionDeniedError: 403 without an active premium plan.
    """
    return await task_service.add_subtask(db, current_user, task_id, subtask_data)


@router.patch(
    "/{task_id}/subtasks/{subtask_id}",
    response_model=SubtaskResponse,
    summary="Rename or toggle a subtask (Premium)",
)
async def update_subtask(
    task_id: uuid.UUID,
    subtask_id: uuid.UUID,
    subtask_data: SubtaskUpdate,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Subtask:
    return await task_service.update_subtask(db, current_user, task_id, subtask_id, subtask_data)


@router.delete(
    "/{task_id}/subtasks/{subtask_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a subtask (Premium)",
)
async def delete_subtask(
    task_id: uuid.UUID,
    subtask_id: uuid.UUID,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await task_service.delete_subtask(db, current_user, task_id, subtask_id)
