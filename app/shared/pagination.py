"""Pagination utilities."""

from typing import Any, Dict, Sequence

from pydantic import BaseModel, Field
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.sql import Select


class PaginationParams(BaseModel):
    """Pagination parameters."""

    page: int = Field(default=1, ge=1, description="Page number (1-based)")
    limit: int = Field(default=10, ge=1, description="Page size")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def total_pages_for(total: int, limit: int) -> int:
    """Ceiling of total / limit."""
    return (total + limit - 1) // limit


async def paginate(
    db: AsyncSession,
    query: Select,
    pagination: PaginationParams,
    order_by: Sequence[Any] = (),
    loader_options: Sequence[Any] = (),
) -> Dict[str, Any]:
    """
    Paginate a SQLAlchemy query.

    The count runs on the bare filtered query; ordering and eager loading are
    applied only to the page fetch.

    Args:
        db: Database session
        query: SQLAlchemy select query carrying the filter
        pagination: Pagination parameters
        order_by: Ordering for the page fetch
        loader_options: Relationship loaders for the page fetch

    Returns:
        Dictionary with pagination info and items
    """

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    total_pages = total_pages_for(total, pagination.limit)

    paginated_query = query.order_by(*order_by).offset(pagination.offset).limit(pagination.limit)
    if loader_options:
        paginated_query = paginated_query.options(*loader_options)

    result = await db.execute(paginated_query)
    items = result.scalars().all()

    return {
        "items": items,
        "total": total,
        "total_pages": total_pages,
        "current_page": pagination.page,
        "limit": pagination.limit,
        "has_next": pagination.page < total_pages,
        "has_prev": pagination.page > 1,
    }
