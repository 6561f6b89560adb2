"""
Admin Service

Cross-user listings and deletions for administrators.
"""

import logging
import uuid
from typing import Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studizen.core.database import Base
from studizen.core.exceptions import NotFoundError, PersistenceError


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


async def list_records(
    db: AsyncSession,
    model: Type[ModelT],
    page: int = 1,
    size: int = 20,
) -> tuple[list[ModelT], int]:
    """
    Page through all rows of `model`, newest first.

    Returns:
        Tuple of (rows, total count).
    """
    try:
        total = await db.scalar(select(func.count()).select_from(model))
        result = await db.execute(
            select(model)
            .order_by(model.created_at.desc())
            .offset((page - 1) * size)
            .limit(size)
        )
    except SQLAlchemyError as exc:
        raise PersistenceError() from exc
    return list(result.scalars().all()), total or 0


async def delete_record(
    db: AsyncSession,
    model: Type[ModelT],
    record_id: uuid.UUID,
    admin_id: uuid.UUID,
) -> None:
    """
    Raises:
        NotFoundError: If no row has `record_id`.
    """
    try:
        record = await db.get(model, record_id)
        if record is None:
            raise NotFoundError()
        await db.delete(record)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError() from exc

    logger.info(f"Admin {admin_id} deleted {model.__tablename__} {record_id}")
