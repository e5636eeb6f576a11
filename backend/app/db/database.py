"""Database connection and session management."""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import get_settings

settings = get_settings()


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""
    pass


# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    future=True,
)

# Create session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Dependency for getting the session factory.

    Leaderboard hydration runs lookups concurrently, and an AsyncSession
    must not be shared between tasks, so services that fan out take the
    factory and open one session per lookup.
    """
    return async_session_maker
