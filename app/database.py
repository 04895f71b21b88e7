"""Database engine and session utilities.

One async engine per process. ``TESTING=true`` points it at
``TEST_DATABASE_URL``; everything else uses ``DATABASE_URL``. ORM models share
the single ``Base`` defined in ``models.base``.
"""

import logging
import os
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings

logger = logging.getLogger(__name__)


def resolve_database_url() -> str:
    """Pick the database URL for the current process."""
    if os.getenv("TESTING") == "true":
        url = os.getenv("TEST_DATABASE_URL") or settings.test_database_url
    else:
        url = settings.database_url

    url = (url or "").strip()
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not configured. Set it in the environment or .env file "
            "(e.g., DATABASE_URL=postgresql+asyncpg://<user>:<pass>@<host>/<db>)."
        )
    return url


DB_URL = resolve_database_url()

engine = create_async_engine(
    DB_URL,
    echo=settings.debug,
    # SQLite has no server side to drop idle connections
    pool_pre_ping=not DB_URL.startswith("sqlite"),
)

# Loaded conversations stay usable after the commit that ends a turn
AsyncSessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, Any]:
    """Yield a session per request; uncommitted work is rolled back on errors."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            logger.error("Rolling back session after database error: %s", str(e))
            await session.rollback()
            raise
