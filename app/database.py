# python
"""Database engine and session utilities.

The store handle is an explicit ``Database`` object: built once at startup
(see ``app.main.lifespan``), kept on ``app.state.database`` and disposed at
shutdown. Request handlers get sessions through the ``get_db`` dependency.
"""
import logging
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings
from models import Base

logger = logging.getLogger(__name__)


class Database:
    """Async engine plus session factory with an explicit lifecycle."""

    def __init__(self, url: str, echo: bool = False, pool_size: int = 20, max_overflow: int = 0):
        url = (url or "").strip()
        if not url:
            raise RuntimeError(
                "DATABASE_URL is not configured. Set it in the environment or .env file "
                "(e.g., DATABASE_URL=postgresql+asyncpg://<user>:<pass>@<host>/<db>)."
            )

        engine_kwargs: dict[str, Any] = {"echo": echo}
        if make_url(url).get_backend_name() != "sqlite":
            engine_kwargs.update(pool_size=pool_size, max_overflow=max_overflow)

        self.url = url
        self.engine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(bind=self.engine, expire_on_commit=False)

    @classmethod
    def from_settings(cls, config: Settings) -> "Database":
        return cls(
            config.active_database_url,
            echo=config.debug,
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
        )

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def session(self) -> AsyncGenerator[AsyncSession, Any]:
        async with self.session_factory() as session:
            yield session

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, Any]:
    database: Database = request.app.state.database
    async for session in database.session():
        yield session
