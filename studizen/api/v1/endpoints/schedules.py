"""
Schedule Routes

CRUD for the current user's weekly class timetable.
"""

import uuid
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from studizen.api.deps import get_current_active_user
from studizen.core.database import get_db
from studizen.models.enums import Weekday
from studizen.models.profile import Profile
from studizen.models.schedule import ClassSchedule
from studizen.schemas.schedule import ScheduleCreate, ScheduleResponse, ScheduleUpdate
from studizen.services import schedule_service


router = APIRouter(prefix="/schedules", tags=["Schedules"])


@router.get(
    "",
    response_model=list[ScheduleResponse],
    summary="List class schedules",
)
async def list_schedules(
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    day: Annotated[Optional[Weekday], Query(description="Only this day")] = None,
) -> list[ClassSchedule]:
    """
    List the user's classes ordered Monday to Sunday, then by start time.
    """
    return await schedule_service.list_schedules(db, current_user, day=day)


@router.post(
    "",
    response_model=ScheduleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a class",
)
async def create_schedule(
    schedule_data: ScheduleCreate,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ClassSchedule:
    return await schedule_service.create_schedule(db, current_user, schedule_data)


@router.patch(
    "/{schedule_id}",
    response_model=ScheduleResponse,
    summary="Update a class",
)
async def update_schedule(
    schedule_id: uuid.UUID,
    schedule_data: ScheduleUpdate,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ClassSchedule:
    """
    Update the provided fields. The resulting end time must still be after
    the start time.
    """
    return await schedule_service.update_schedule(db, current_user, schedule_id, schedule_data)


@router.delete(
    "/{schedule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a class",
)
async def delete_schedule(
    schedule_id: uuid.UUID,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await schedule_service.delete_schedule(db, current_user, schedule_id)
