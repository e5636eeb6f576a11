"""
Known user property and event log names.

Leaderboard configuration may only reference names listed here. Both sets
are closed enumerations; membership is checked once when a screen's
configuration is validated.
"""

from enum import Enum


class UserProperty(str, Enum):
    """Persisted per-user attributes."""

    REAL_NAME = "real_name"
    BIRTHDATE = "birthdate"
    SEX = "sex"
    LOCATION = "location"
    AFFILIATIONS = "affiliation"
    EMAIL_ADDRESS = "email_address"
    WEB_ADDRESS = "web_address"
    TERM_HEIGHT = "term_height"
    TERM_WIDTH = "term_width"
    THEME_ID = "theme_id"
    ACCOUNT_STATUS = "account_status"
    ACCOUNT_CREATED = "account_created"
    LAST_LOGIN_TIMESTAMP = "last_login_timestamp"
    LOGIN_COUNT = "login_count"
    USER_COMMENT = "user_comment"
    SCORE = "score"
    MESSAGE_POST_COUNT = "post_count"
    FILE_UL_TOTAL_COUNT = "ul_total_count"
    FILE_DL_TOTAL_COUNT = "dl_total_count"
    FILE_UL_TOTAL_BYTES = "ul_total_bytes"
    FILE_DL_TOTAL_BYTES = "dl_total_bytes"
    DOOR_RUN_TOTAL_COUNT = "door_run_total_count"
    DOOR_RUN_TOTAL_MINUTES = "door_run_total_minutes"
    ACHIEVEMENT_TOTAL_COUNT = "achievement_total_count"
    ACHIEVEMENT_TOTAL_POINTS = "achievement_total_points"
    MINUTES_ONLINE_TOTAL_COUNT = "minutes_online_total_count"


class UserLogName(str, Enum):
    """Names of events recorded in the user event log."""

    UPLOAD = "ul_files"
    UPLOAD_BYTES = "ul_file_bytes"
    DOWNLOAD = "dl_files"
    DOWNLOAD_BYTES = "dl_file_bytes"
    ACHIEVEMENT = "achievement_earned"
    ACHIEVEMENT_POINTS = "achievement_points"
    LOGIN = "login"
    NEW_USER = "new_user"
    POST = "post"
    DOOR_RUN = "door_run"
    DOOR_MINUTES = "door_minutes"
    MINUTES_ONLINE = "minutes_online"


# Properties resolved for every hydrated leaderboard entry
DISPLAY_PROPERTIES = (
    UserProperty.REAL_NAME,
    UserProperty.LOCATION,
    UserProperty.AFFILIATIONS,
)

KNOWN_PROPERTY_NAMES = frozenset(p.value for p in UserProperty)
KNOWN_LOG_NAMES = frozenset(n.value for n in UserLogName)


def is_known_property(name: object) -> bool:
    """Check that ``name`` is a known user property name."""
    return isinstance(name, str) and name in KNOWN_PROPERTY_NAMES


def is_known_log_name(name: object) -> bool:
    """Check that ``name`` is a known event log name."""
    return isinstance(name, str) and name in KNOWN_LOG_NAMES
