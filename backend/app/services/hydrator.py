"""Hydration of ranked rows into displayable leaderboard entries."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import QueryFailed, UserNotFound, UserResolutionFailed
from app.core.user_props import DISPLAY_PROPERTIES, UserProperty
from app.services.ranking_query import LeaderboardRow
from app.services.user_directory import UserDirectory


@dataclass(frozen=True)
class LeaderboardEntry:
    """A single leaderboard entry as handed to the display layer."""

    user_id: int
    user_name: str
    real_name: str
    location: str
    affiliations: str
    value: int


async def hydrate_row(
    row: LeaderboardRow,
    directory: UserDirectory,
    slot_id: Optional[int] = None,
) -> LeaderboardEntry:
    """
    Resolve display attributes for one ranked row.

    Missing properties become empty strings. An unknown user is fatal.

    Raises:
        UserResolutionFailed: If the user's name cannot be resolved.
        QueryFailed: If the store fails a directory lookup.
    """
    try:
        user_name = await directory.get_display_name(row.user_id)
        props = await directory.get_properties(
            row.user_id, [p.value for p in DISPLAY_PROPERTIES]
        )
    except UserNotFound as e:
        raise UserResolutionFailed(row.user_id) from e
    except SQLAlchemyError as e:
        raise QueryFailed(slot_id, e) from e

    return LeaderboardEntry(
        user_id=row.user_id,
        user_name=user_name,
        real_name=props.get(UserProperty.REAL_NAME.value) or "",
        location=props.get(UserProperty.LOCATION.value) or "",
        affiliations=props.get(UserProperty.AFFILIATIONS.value) or "",
        value=row.value,
    )


async def hydrate_rows(
    rows: Sequence[LeaderboardRow],
    directory: UserDirectory,
    concurrency: int = 8,
    slot_id: Optional[int] = None,
) -> list[LeaderboardEntry]:
    """
    Hydrate a ranked batch, preserving row order.

    Lookups run concurrently, at most ``concurrency`` at a time. If any
    lookup fails the remaining lookups are cancelled and no partial list
    is returned.

    Raises:
        UserResolutionFailed: If any row's user cannot be resolved.
        QueryFailed: If the store fails any directory lookup.
    """
    if not rows:
        return []

    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _bounded(row: LeaderboardRow) -> LeaderboardEntry:
        async with semaphore:
            return await hydrate_row(row, directory, slot_id)

    tasks = [asyncio.ensure_future(_bounded(row)) for row in rows]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        # Let cancelled lookups release their sessions before propagating
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
