"""User directory lookups used to hydrate leaderboard rows."""

from collections.abc import Iterable
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import UserNotFound
from app.models.user import User
from app.models.user_property import UserPropertyRecord


class UserDirectory(Protocol):
    """Read-only access to user display data."""

    async def get_display_name(self, user_id: int) -> str:
        """Return the user's name. Raises UserNotFound."""
        ...

    async def get_properties(self, user_id: int, names: Iterable[str]) -> dict[str, str]:
        """Return the subset of ``names`` the user has set."""
        ...


class SqlUserDirectory:
    """User directory backed by the ``users`` and ``user_property`` tables.

    Opens a fresh session per lookup so lookups can run concurrently.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def get_display_name(self, user_id: int) -> str:
        async with self._session_maker() as db:
            result = await db.execute(select(User.user_name).where(User.id == user_id))
            user_name = result.scalar_one_or_none()

        if user_name is None:
            raise UserNotFound(user_id)
        return user_name

    async def get_properties(self, user_id: int, names: Iterable[str]) -> dict[str, str]:
        names = list(names)
        if not names:
            return {}

        async with self._session_maker() as db:
            result = await db.execute(
                select(UserPropertyRecord.prop_name, UserPropertyRecord.prop_value).where(
                    UserPropertyRecord.user_id == user_id,
                    UserPropertyRecord.prop_name.in_(names),
                )
            )
            return {row.prop_name: row.prop_value for row in result}
