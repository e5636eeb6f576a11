"""Append-only user event log model."""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserEventLogRecord(Base):
    """A timestamped named event for a user.

    ``log_value`` is either a number (a magnitude such as bytes uploaded) or
    free text (a marker such as a door name), which leaderboards count as 1.
    """

    __tablename__ = "user_event_log"
    __table_args__ = (
        Index("ix_user_event_log_name_timestamp", "log_name", "timestamp"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )
    log_name: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )
    log_value: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<UserEventLogRecord {self.user_id}:{self.log_name}={self.log_value!r}>"
