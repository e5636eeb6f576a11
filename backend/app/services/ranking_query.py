"""Ranking query construction for top X leaderboards."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import BigInteger, Boolean, Select, case, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement

from app.models.user_event_log import UserEventLogRecord
from app.models.user_property import UserPropertyRecord
from app.schemas.top_x import SlotConfig, SourceType


@dataclass(frozen=True)
class LeaderboardRow:
    """A ranked (user, score) pair straight from the store."""

    user_id: int
    value: int


# Longest digit string that always fits a signed 64-bit integer
MAX_INTEGER_DIGITS = 18


class is_integer_text(FunctionElement):
    """True when a text column holds an optionally signed integer literal.

    At most MAX_INTEGER_DIGITS digits, so the BIGINT cast cannot overflow.
    """

    type = Boolean()
    name = "is_integer_text"
    inherit_cache = True


@compiles(is_integer_text)
def _compile_is_integer_text(element, compiler, **kw):
    (arg,) = list(element.clauses)
    expr = compiler.process(arg, **kw)
    return (
        f"((({expr} <> '' AND {expr} NOT GLOB '*[^0-9]*') OR "
        f"({expr} GLOB '-[0-9]*' AND substr({expr}, 2) NOT GLOB '*[^0-9]*')) "
        f"AND length(ltrim({expr}, '-')) <= {MAX_INTEGER_DIGITS})"
    )


@compiles(is_integer_text, "postgresql")
def _compile_is_integer_text_pg(element, compiler, **kw):
    (arg,) = list(element.clauses)
    expr = compiler.process(arg, **kw)
    return f"({expr} ~ '^-?[0-9]{{1,{MAX_INTEGER_DIGITS}}}$')"


def clamp_row_limit(row_limit: Optional[int]) -> int:
    """Never let a ranking query be unbounded or return zero rows."""
    if not row_limit or row_limit < 1:
        return 1
    return int(row_limit)


def user_prop_query(prop_name: str, row_limit: int) -> Select:
    """
    Rank users by a numeric user property.

    Non-numeric property values score 0 on every backend.
    """
    prop_value = UserPropertyRecord.prop_value
    value = case(
        (is_integer_text(prop_value), cast(prop_value, BigInteger)),
        else_=0,
    ).label("value")

    return (
        select(UserPropertyRecord.user_id.label("user_id"), value)
        .where(UserPropertyRecord.prop_name == prop_name)
        .order_by(value.desc())
        .limit(clamp_row_limit(row_limit))
    )


def user_event_log_query(
    log_name: str,
    row_limit: int,
    days_back: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Select:
    """
    Rank users by an event log aggregate.

    Numeric log values are summed; any other value counts as one
    occurrence. A days_back of None or 0 means no time window.
    """
    log_value = UserEventLogRecord.log_value
    value = func.sum(
        case(
            (is_integer_text(log_value), cast(log_value, BigInteger)),
            else_=1,
        )
    ).label("value")

    stmt = select(UserEventLogRecord.user_id.label("user_id"), value).where(
        UserEventLogRecord.log_name == log_name
    )

    if days_back:
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=days_back)
        stmt = stmt.where(UserEventLogRecord.timestamp >= cutoff)

    return (
        stmt.group_by(UserEventLogRecord.user_id)
        .order_by(value.desc())
        .limit(clamp_row_limit(row_limit))
    )


def build_ranking_query(
    slot: SlotConfig,
    row_limit: Optional[int],
    now: Optional[datetime] = None,
) -> Select:
    """Build the ranking query for a validated slot."""
    if slot.source_type == SourceType.USER_PROP:
        return user_prop_query(slot.prop_name, row_limit)
    if slot.source_type == SourceType.USER_EVENT_LOG:
        return user_event_log_query(slot.log_name, row_limit, slot.days_back, now=now)
    raise ValueError(f"Unexpected source type: {slot.source_type}")


async def fetch_ranking(db: AsyncSession, stmt: Select) -> list[LeaderboardRow]:
    """Run a ranking query and return its rows in store order."""
    result = await db.execute(stmt)
    return [
        LeaderboardRow(user_id=int(row.user_id), value=int(row.value or 0))
        for row in result
    ]
