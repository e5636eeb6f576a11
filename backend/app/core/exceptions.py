"""Errors raised while validating, querying and hydrating leaderboards."""

from typing import Optional


class TopXError(Exception):
    """Base class for leaderboard errors."""

    pass


class InvalidConfiguration(TopXError):
    """Exception raised when a slot configuration is malformed.

    Raised before any query runs; a bad configuration is never partially
    applied.
    """

    def __init__(
        self,
        message: str,
        slot_id: Optional[str] = None,
        field: Optional[str] = None,
    ):
        self.slot_id = slot_id
        self.field = field
        prefix = ""
        if slot_id is not None:
            prefix = f"slot {slot_id}"
            if field is not None:
                prefix += f" ({field})"
            prefix += ": "
        super().__init__(f"{prefix}{message}")


class SlotNotFound(InvalidConfiguration):
    """Exception raised when a configured slot has no display region."""

    def __init__(self, slot_id: str):
        super().__init__(
            f"no display region VM{slot_id} on this screen",
            slot_id=slot_id,
            field="slot",
        )


class QueryFailed(TopXError):
    """Exception raised when the store fails to run a ranking query."""

    def __init__(self, slot_id: Optional[int], cause: Exception):
        self.slot_id = slot_id
        self.cause = cause
        super().__init__(f"ranking query failed for slot {slot_id}: {cause}")


class UserNotFound(TopXError):
    """Exception raised by a user directory for an unknown user id."""

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"user {user_id} not found")


class UserResolutionFailed(TopXError):
    """Exception raised when a ranked user cannot be hydrated."""

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"could not resolve user {user_id} for leaderboard entry")


class RenderTimedOut(TopXError):
    """Exception raised when a screen render exceeds its time budget."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"leaderboard render exceeded {timeout:.2f}s")
