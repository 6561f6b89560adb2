"""
Schedule Service

Owner-scoped CRUD for weekly class schedules.
"""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studizen.core.exceptions import NotFoundError, PersistenceError, StudizenError
from studizen.models.enums import Weekday
from studizen.models.profile import Profile
from studizen.models.schedule import ClassSchedule
from studizen.schemas.schedule import ScheduleCreate, ScheduleUpdate


# Fields a client may clear by sending null
NULLABLE_FIELDS = {"location", "lecturer"}


def sort_key(schedule: ClassSchedule) -> tuple:
    """Calendar order: Monday first, then by start time."""
    return (Weekday(schedule.day).order, schedule.start_time)


async def list_schedules(
    db: AsyncSession,
    user: Profile,
    day: Optional[Weekday] = None,
) -> list[ClassSchedule]:
    query = select(ClassSchedule).where(ClassSchedule.user_id == user.id)
    if day is not None:
        query = query.where(ClassSchedule.day == day)
    try:
        result = await db.execute(query)
    except SQLAlchemyError as exc:
        raise PersistenceError() from exc
    return sorted(result.scalars().all(), key=sort_key)


async def get_owned_schedule(
    db: AsyncSession,
    user: Profile,
    schedule_id: uuid.UUID,
) -> ClassSchedule:
    """
    Raises:
        NotFoundError: If the entry does not exist or belongs to someone else.
    """
    try:
        result = await db.execute(
            select(ClassSchedule).where(
                ClassSchedule.id == schedule_id,
                ClassSchedule.user_id == user.id,
            )
        )
    except SQLAlchemyError as exc:
        raise PersistenceError() from exc
    schedule = result.scalar_one_or_none()
    if schedule is None:
        raise NotFoundError(language=user.language.value)
    return schedule


async def create_schedule(db: AsyncSession, user: Profile, data: ScheduleCreate) -> ClassSchedule:
    schedule = ClassSchedule(user_id=user.id, **data.model_dump())
    db.add(schedule)
    try:
        await db.commit()
        await db.refresh(schedule)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError() from exc
    return schedule


async def update_schedule(
    db: AsyncSession,
    user: Profile,
    schedule_id: uuid.UUID,
    data: ScheduleUpdate,
) -> ClassSchedule:
    """
    Apply a partial update.

    Raises:
        StudizenError: If the resulting time range is empty.
    """
    schedule = await get_owned_schedule(db, user, schedule_id)
    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_FIELDS
    }

    start = changes.get("start_time", schedule.start_time)
    end = changes.get("end_time", schedule.end_time)
    if end <= start:
        raise StudizenError("invalid_time_range", language=user.language.value)

    for field, value in changes.items():
        setattr(schedule, field, value)

    try:
        await db.commit()
        await db.refresh(schedule)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError() from exc
    return schedule


async def delete_schedule(db: AsyncSession, user: Profile, schedule_id: uuid.UUID) -> None:
    schedule = await get_owned_schedule(db, user, schedule_id)
    try:
        await db.delete(schedule)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError() from exc
