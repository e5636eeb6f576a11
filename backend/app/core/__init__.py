# Core module
from .exceptions import (
    TopXError,
    InvalidConfiguration,
    SlotNotFound,
    QueryFailed,
    UserNotFound,
    UserResolutionFailed,
    RenderTimedOut,
)
from .user_props import (
    UserProperty,
    UserLogName,
    DISPLAY_PROPERTIES,
    is_known_property,
    is_known_log_name,
)

__all__ = [
    "TopXError",
    "InvalidConfiguration",
    "SlotNotFound",
    "QueryFailed",
    "UserNotFound",
    "UserResolutionFailed",
    "RenderTimedOut",
    "UserProperty",
    "UserLogName",
    "DISPLAY_PROPERTIES",
    "is_known_property",
    "is_known_log_name",
]
