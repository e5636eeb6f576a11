"""Database models package."""

from app.models.user import User
from app.models.user_property import UserPropertyRecord
from app.models.user_event_log import UserEventLogRecord

__all__ = ["User", "UserPropertyRecord", "UserEventLogRecord"]
