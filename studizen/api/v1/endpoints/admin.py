"""
Admin Routes

Cross-user listings, deletions and OTP housekeeping. Every route requires
the ADMIN role.
"""

import uuid
from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from studizen.api.deps import require_admin
from studizen.core.database import get_db
from studizen.models.profile import Profile
from studizen.models.schedule import ClassSchedule
from studizen.models.task import Task
from studizen.schemas.admin import (
    AdminScheduleResponse,
    AdminTaskResponse,
    AdminUserResponse,
    OTPPurgeResponse,
    Page,
)
from studizen.services import admin_service, verification_service


router = APIRouter(prefix="/admin", tags=["Admin"])

PageNumber = Annotated[int, Query(ge=1)]
PageSize = Annotated[int, Query(ge=1, le=100)]


@router.get(
    "/users",
    response_model=Page[AdminUserResponse],
    summary="List all users",
)
async def list_users(
    admin: Annotated[Profile, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    page: PageNumber = 1,
    size: PageSize = 20,
) -> Page[AdminUserResponse]:
    rows, total = await admin_service.list_records(db, Profile, page, size)
    return Page[AdminUserResponse](
        items=[AdminUserResponse.model_validate(row) for row in rows],
        total=total,
        page=page,
        size=size,
    )


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user and all their data",
)
async def delete_user(
    user_id: uuid.UUID,
    admin: Annotated[Profile, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await admin_service.delete_record(db, Profile, user_id, admin.id)


@router.get(
    "/schedules",
    response_model=Page[AdminScheduleResponse],
    summary="List all class schedules",
)
async def list_schedules(
    admin: Annotated[Profile, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    page: PageNumber = 1,
    size: PageSize = 20,
) -> Page[AdminScheduleResponse]:
    rows, total = await admin_service.list_records(db, ClassSchedule, page, size)
    return Page[AdminScheduleResponse](
        items=[AdminScheduleResponse.model_validate(row) for row in rows],
        total=total,
        page=page,
        size=size,
    )


@router.delete(
    "/schedules/{schedule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete any class schedule",
)
async def delete_schedule(
    schedule_id: uuid.UUID,
    admin: Annotated[Profile, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await admin_service.delete_record(db, ClassSchedule, schedule_id, admin.id)


@router.get(
    "/tasks",
    response_model=Page[AdminTaskResponse],
    summary="List all tasks",
)
async def list_tasks(
    admin: Annotated[Profile, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    page: PageNumber = 1,
    size: PageSize = 20,
) -> Page[AdminTaskResponse]:
    rows, total = await admin_service.list_records(db, Task, page, size)
    return Page[AdminTaskResponse](
        items=[AdminTaskResponse.model_validate(row) for row in rows],
        total=total,
        page=page,
        size=size,
    )


@router.delete(
    "/tasks/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete any task",
)
async def delete_task(
    task_id: uuid.UUID,
    admin: Annotated[Profile, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await admin_service.delete_record(db, Task, task_id, admin.id)


@router.post(
    "/otp/purge",
    response_model=OTPPurgeResponse,
    summary="Delete stale OTP records",
)
async def purge_otps(
    admin: Annotated[Profile, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    older_than_hours: Annotated[int, Query(ge=1, le=24 * 365)] = 24,
) -> OTPPurgeResponse:
    """
    Remove used or expired codes created more than `older_than_hours` ago.
    Live codes are never touched.
    """
    deleted = await verification_service.get_otp_service(db).purge_stale(
        timedelta(hours=older_than_hours)
    )
    return OTPPurgeResponse(deleted=deleted, older_than_hours=older_than_hours)
