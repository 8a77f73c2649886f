"""Translation of store failures into ``DataAccessError``."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.base import DataAccessError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def data_access(db: AsyncSession, operation: str) -> AsyncIterator[None]:
    """Roll back, log and re-raise store errors as a generic ``DataAccessError``.

    Domain exceptions raised inside the block pass through untouched.
    """
    try:
        yield
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Store failure during %s: %s", operation, str(e))
        raise DataAccessError(f"Failed to {operation}") from e
