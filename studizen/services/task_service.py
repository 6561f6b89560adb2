"""
Task Service

Owner-scoped CRUD for tasks, plus premium-only subtasks.
"""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studizen.core.exceptions import NotFoundError, PersistenceError
from studizen.models.enums import TaskStatus
from studizen.models.profile import Profile
from studizen.models.task import Subtask, Task
from studizen.schemas.task import (
    SubtaskCreate,
    SubtaskUpdate,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from studizen.services import premium_service


def to_response(task: Task, today: Optional[date] = None) -> TaskResponse:
    """Serialize a task with its overdue flag computed for `today`."""
    today = today or date.today()
    response = TaskResponse.model_validate(task)
    return response.model_copy(update={"is_overdue": task.overdue_on(today)})


async def _commit(db: AsyncSession) -> None:
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError() from exc


async def list_tasks(
    db: AsyncSession,
    user: Profile,
    status: Optional[TaskStatus] = None,
) -> list[Task]:
    """Tasks ordered by deadline, optionally filtered by status."""
    query = select(Task).where(Task.user_id == user.id)
    if status is not None:
        query = query.where(Task.status == status)
    query = query.order_by(Task.deadline.asc(), Task.created_at.asc())
    try:
        result = await db.execute(query)
    except SQLAlchemyError as exc:
        raise PersistenceError() from exc
    return list(result.scalars().all())


async def get_owned_task(
    db: AsyncSession,
    user: Profile,
    task_id: uuid.UUID,
    reload: bool = False,
) -> Task:
    """
    Fetch one of the user's tasks with its subtasks loaded.

    Args:
        reload: Overwrite an instance already in the session with fresh row
            and subtask state.

    Raises:
        NotFoundError: If the task does not exist or belongs to someone else.
    """
    query = select(Task).where(Task.id == task_id, Task.user_id == user.id)
    if reload:
        query = query.execution_options(populate_existing=True)
    try:
        result = await db.execute(query)
    except SQLAlchemyError as exc:
        raise PersistenceError() from exc
    task = result.scalar_one_or_none()
    if task is None:
        raise NotFoundError(language=user.language.value)
    return task


async def create_task(db: AsyncSession, user: Profile, data: TaskCreate) -> Task:
    task = Task(user_id=user.id, **data.model_dump())
    db.add(task)
    await _commit(db)
    return await get_owned_task(db, user, task.id, reload=True)


async def update_task(
    db: AsyncSession,
    user: Profile,
    task_id: uuid.UUID,
    data: TaskUpdate,
) -> Task:
    task = await get_owned_task(db, user, task_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field != "description":
            continue
        setattr(task, field, value)
    await _commit(db)
    return await get_owned_task(db, user, task.id, reload=True)


async def delete_task(db: AsyncSession, user: Profile, task_id: uuid.UUID) -> None:
    task = await get_owned_task(db, user, task_id)
    await db.delete(task)
    await _commit(db)


# ============== Subtasks (Premium) ==============

async def _get_owned_subtask(
    db: AsyncSession,
    user: Profile,
    task_id: uuid.UUID,
    subtask_id: uuid.UUID,
) -> Subtask:
    task = await get_owned_task(db, user, task_id)
    for subtask in task.subtasks:
        if subtask.id == subtask_id:
            return subtask
    raise NotFoundError(language=user.language.value)


async def list_subtasks(db: AsyncSession, user: Profile, task_id: uuid.UUID) -> list[Subtask]:
    await premium_service.require_premium(db, user)
    task = await get_owned_task(db, user, task_id)
    return list(task.subtasks)


async def add_subtask(
    db: AsyncSession,
    user: Profile,
    task_id: uuid.UUID,
    data: SubtaskCreate,
) -> Subtask:
    await premium_service.require_premium(db, user)
    task = await get_owned_task(db, user, task_id)
    subtask = Subtask(task_id=task.id, title=data.title, is_completed=False)
    db.add(subtask)
    await _commit(db)
    await db.refresh(subtask)
    return subtask


async def update_subtask(
    db: AsyncSession,
    user: Profile,
    task_id: uuid.UUID,
    subtask_id: uuid.UUID,
    data: SubtaskUpdate,
) -> Subtask:
    await premium_service.require_premium(db, user)
    subtask = await _get_owned_subtask(db, user, task_id, subtask_id)
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(subtask, field, value)
    await _commit(db)
    await db.refresh(subtask)
    return subtask


async def delete_subtask(
    db: AsyncSession,
    user: Profile,
    task_id: uuid.UUID,
    subtask_id: uuid.UUID,
) -> None:
    await premium_service.require_premium(db, user)
    subtask = await _get_owned_subtask(db, user, task_id, subtask_id)
    await db.delete(subtask)
    await _commit(db)
