"""
Pytest fixtures for identity persistence tests.

Each test gets a fresh in-memory SQLite database with the schema created.
"""

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from qbs.infrastructure.persistence.sqlalchemy import Base, create_database_engine
from qbs_identity.infrastructure.persistence.sqlalchemy import (
    UserModel,  # noqa: F401
    UserRepositorySQLAlchemy,
)


@pytest_asyncio.fixture(scope="function")
async def async_engine(make_settings):
    engine = create_database_engine(make_settings())
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def async_session(async_engine):
    """Provide a session; uncommitted work is rolled back afterwards."""
    session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def user_repo(async_session):
    return UserRepositorySQLAlchemy(async_session, timeout=5.0)
