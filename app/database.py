"""
Database Connection Module
Wraps the SQLAlchemy async engine in an explicitly owned handle.

The application lifespan creates one ``Database`` at startup, stores it on
``app.state.db`` and disposes it on shutdown. Routes obtain sessions through
the ``get_db`` dependency.
"""

import logging
from typing import Any, AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


# Base class for all our models
class Base(DeclarativeBase):
    pass


class Database:
    """
    Owns the async engine and its session factory.

    Args:
        url: Async SQLAlchemy URL (``postgresql+psycopg://...``)
        echo: Log all SQL statements
        **engine_kwargs: Passed through to ``create_async_engine``
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any):
        if url.startswith("postgresql"):
            engine_kwargs.setdefault("pool_size", 5)
            engine_kwargs.setdefault("max_overflow", 10)

        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        # Objects remain accessible after commit
        self.session_maker = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create all tables. Called once at application startup."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def ping(self) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()

    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_maker() as session:
            try:
                yield session
            finally:
                await session.close()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    Dependency injection for FastAPI routes.
    Yields a database session from the application's Database handle.
    """
    db: Database = request.app.state.db
    async for session in db.session():
        yield session
