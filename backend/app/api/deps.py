"""API dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.database import get_session_maker
from app.services.top_x_service import TopXEngine


def get_top_x_engine(
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_session_maker),
) -> TopXEngine:
    """Get a leaderboard engine bound to the current session factory."""
    return TopXEngine(session_maker)


# Type aliases for cleaner route signatures
Engine = Annotated[TopXEngine, Depends(get_top_x_engine)]
