"""
Database session management.

WHY: Each request is one unit of work. The session commits once at the end
of the request, so every repository write a request makes (for example the
task and project deletes of a cascading project delete) succeeds or fails
together.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from infraworks.core.config import settings

logger = logging.getLogger(__name__)


# WHY: pool_pre_ping recycles stale connections after database restarts;
# pool sizing comes from settings so small deployments stay small.
engine = create_async_engine(
    settings.async_database_url,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
)

# expire_on_commit=False: response models read attributes after commit.
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """
    Transactional session for code running outside a request.

    Usage:
        async with session_scope() as session:
            await ProfileService(session).bootstrap_admin(...)
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            logger.warning("Rolling back session after error", exc_info=True)
            await session.rollback()
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get database session.

    WHY: FastAPI dependency injection ensures each request gets its own
    database session. Any exception rolls the whole request back.

    Yields:
        AsyncSession: Database session for the request
    """
    async with session_scope() as session:
        yield session
