"""Top X leaderboard engine: validate, query, hydrate, render."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Protocol

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import get_settings
from app.core.exceptions import (
    InvalidConfiguration,
    QueryFailed,
    RenderTimedOut,
    UserResolutionFailed,
)
from app.schemas.top_x import RenderRequest, ScreenRegion, SlotConfig
from app.services.config_validator import validate_config
from app.services.hydrator import LeaderboardEntry, hydrate_rows
from app.services.ranking_query import (
    LeaderboardRow,
    build_ranking_query,
    clamp_row_limit,
    fetch_ranking,
)
from app.services.user_directory import SqlUserDirectory, UserDirectory

logger = logging.getLogger(__name__)


class ListDisplay(Protocol):
    """The display layer a render hands its lists to."""

    def render_list(self, slot_id: int, entries: list[LeaderboardEntry]) -> None:
        ...


class CollectingDisplay:
    """Display that keeps rendered lists in memory, keyed by slot."""

    def __init__(self):
        self.lists: dict[int, list[LeaderboardEntry]] = {}

    def render_list(self, slot_id: int, entries: list[LeaderboardEntry]) -> None:
        self.lists[slot_id] = list(entries)


@dataclass
class SlotResult:
    """Outcome of rendering one slot."""

    slot: SlotConfig
    entries: list[LeaderboardEntry] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RenderReport:
    """Outcome of rendering a screen, in slot declaration order."""

    slots: list[SlotResult] = field(default_factory=list)

    @property
    def failed(self) -> list[SlotResult]:
        return [s for s in self.slots if not s.ok]


class TopXEngine:
    """Renders configured top X leaderboards into a screen's list regions."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        directory: Optional[UserDirectory] = None,
        hydration_concurrency: Optional[int] = None,
        render_timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self._session_maker = session_maker
        self.directory = directory or SqlUserDirectory(session_maker)
        self.hydration_concurrency = hydration_concurrency or settings.hydration_concurrency
        self.render_timeout = render_timeout or settings.render_timeout_seconds

    def validate(
        self,
        mci_map: Any,
        regions: Sequence[ScreenRegion],
    ) -> dict[int, SlotConfig]:
        """Validate configuration against the screen. Raises InvalidConfiguration."""
        return validate_config(mci_map, {region.slot_id for region in regions})

    async def query(self, slot: SlotConfig, row_limit: Optional[int]) -> list[LeaderboardRow]:
        """
        Run the ranking query for a slot.

        Raises:
            QueryFailed: If the store rejects or fails the query.
        """
        stmt = build_ranking_query(slot, clamp_row_limit(row_limit))
        try:
            async with self._session_maker() as db:
                return await fetch_ranking(db, stmt)
        except SQLAlchemyError as e:
            raise QueryFailed(slot.slot_id, e) from e

    async def hydrate(
        self,
        rows: Sequence[LeaderboardRow],
        slot_id: Optional[int] = None,
    ) -> list[LeaderboardEntry]:
        """Hydrate ranked rows. Raises UserResolutionFailed or QueryFailed."""
        return await hydrate_rows(
            rows, self.directory, self.hydration_concurrency, slot_id=slot_id
        )

    async def render_slot(
        self,
        slot: SlotConfig,
        row_limit: Optional[int],
        display: ListDisplay,
    ) -> SlotResult:
        """Render one slot. A failed slot renders as an empty list."""
        try:
            rows = await self.query(slot, row_limit)
            entries = await self.hydrate(rows, slot.slot_id)
        except (QueryFailed, UserResolutionFailed) as e:
            logger.warning(
                f"Leaderboard slot {slot.region_name} ({slot.source_type.value}:"
                f"{slot.source_name}) failed: {type(e).__name__}: {e}"
            )
            display.render_list(slot.slot_id, [])
            return SlotResult(slot=slot, error=type(e).__name__)

        display.render_list(slot.slot_id, entries)
        return SlotResult(slot=slot, entries=entries)

    async def _render_slots(
        self,
        configs: dict[int, SlotConfig],
        heights: dict[int, Optional[int]],
        display: ListDisplay,
    ) -> RenderReport:
        report = RenderReport()
        # Slots run one at a time, in declaration order
        for slot_id, slot in configs.items():
            result = await self.render_slot(slot, heights.get(slot_id), display)
            report.slots.append(result)
        return report

    async def render(
        self,
        mci_map: Any,
        regions: Sequence[ScreenRegion],
        display: ListDisplay,
    ) -> RenderReport:
        """
        Validate, query and hydrate every configured slot of a screen.

        Args:
            mci_map: Slot configuration mapping.
            regions: List regions available on the screen.
            display: Receives one render_list call per slot.

        Returns:
            Per-slot results in declaration order.

        Raises:
            InvalidConfiguration: Before any query runs.
            RenderTimedOut: If the whole render exceeds render_timeout.
        """
        configs = self.validate(mci_map, regions)
        heights = {region.slot_id: region.height for region in regions}

        try:
            report = await asyncio.wait_for(
                self._render_slots(configs, heights, display),
                timeout=self.render_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Leaderboard render timed out after {self.render_timeout:.2f}s "
                f"({len(configs)} slot(s))"
            )
            raise RenderTimedOut(self.render_timeout) from None

        logger.info(
            f"Rendered {len(report.slots)} leaderboard slot(s), "
            f"{len(report.failed)} failed"
        )
        return report


def load_screen_config(path: str) -> RenderRequest:
    """
    Load a screen's slot configuration and regions from a JSON file.

    Raises:
        InvalidConfiguration: If the file cannot be read or is malformed.
    """
    try:
        return RenderRequest.model_validate_json(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        logger.error(f"Cannot load top X screen configuration {path}: {e}")
        raise InvalidConfiguration(
            f"cannot load screen configuration {path}: {e}",
            field="configFile",
        ) from e
