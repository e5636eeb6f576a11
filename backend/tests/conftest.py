"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

# The application engine is created at import time; keep it off Postgres.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.main import app
from app.db.database import Base, get_session_maker
from app.models import User, UserEventLogRecord, UserPropertyRecord


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """Create a test database engine.

    File-backed so that concurrent lookups on separate connections see the
    same data.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'top_x.db'}",
        poolclass=NullPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_maker(test_engine) -> async_sessionmaker[AsyncSession]:
    """Create a test session factory."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    app.dependency_overrides[get_session_maker] = lambda: session_maker

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def seed(session_maker):
    """Insert users, properties and event log rows.

    users: {user_id: user_name}
    props: {(user_id, prop_name): value}
    events: [(user_id, log_name, value, timestamp or None)]
    """

    async def _seed(
        users: Optional[dict] = None,
        props: Optional[dict] = None,
        events: Optional[list] = None,
    ) -> None:
        async with session_maker() as session:
            for user_id, user_name in (users or {}).items():
                session.add(User(id=user_id, user_name=user_name))
            await session.flush()

            for (user_id, prop_name), value in (props or {}).items():
                session.add(
                    UserPropertyRecord(user_id=user_id, prop_name=prop_name, prop_value=str(value))
                )

            for user_id, log_name, value, timestamp in events or []:
                session.add(
                    UserEventLogRecord(
                        user_id=user_id,
                        log_name=log_name,
                        log_value=str(value),
                        timestamp=timestamp or datetime.now(timezone.utc),
                    )
                )
            await session.commit()

    return _seed


@pytest.fixture
def sample_users() -> dict:
    """Sample users for testing."""
    return {1: "alice", 2: "bob", 3: "carol"}
