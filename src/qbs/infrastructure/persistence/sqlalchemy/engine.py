"""Engine and session factory construction."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from qbs.domain.shared.exceptions import ServiceUnavailableError
from qbs_config.settings import Settings

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    db_path = url.split("///", 1)[-1] if "///" in url else ""
    return not db_path or db_path.startswith(":memory:") or "mode=memory" in url


def create_database_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database.

    In-memory SQLite shares a single connection so the database survives
    across sessions. File-backed SQLite gets a connection per session;
    concurrent writers then serialize on the database lock and a
    duplicate insert fails on the unique index instead of clobbering
    another session's transaction.
    """
    url = settings.database_url

    if url.startswith("sqlite"):
        if _is_memory_sqlite(url):
            return create_async_engine(
                url,
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        Path(url.split("///", 1)[-1]).parent.mkdir(parents=True, exist_ok=True)
        return create_async_engine(
            url,
            echo=False,
            connect_args={"timeout": settings.db_timeout_seconds},
        )

    return create_async_engine(
        url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
        pool_timeout=settings.db_timeout_seconds,
        connect_args={"timeout": settings.db_timeout_seconds},
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@asynccontextmanager
async def db_timeout(seconds: float | None) -> AsyncIterator[None]:
    """Bound a block of database work and map outages to ServiceUnavailable.

    Parameters
    ----------
    seconds
        Upper bound for the enclosed work; ``None`` disables the bound.
    """
    try:
        async with asyncio.timeout(seconds):
            yield
    except TimeoutError as e:
        logger.error("Database call exceeded %.1fs timeout", seconds or 0)
        raise ServiceUnavailableError(details={"reason": "timeout"}) from e
    except OperationalError as e:
        logger.error("Database unreachable: %s", e.orig)
        raise ServiceUnavailableError(details={"reason": "operational"}) from e
    except DBAPIError as e:
        if e.connection_invalidated:
            logger.error("Database connection lost: %s", e.orig)
            raise ServiceUnavailableError(details={"reason": "disconnect"}) from e
        raise
