"""Validation of a screen's leaderboard slot configuration."""

import logging
import re
from collections.abc import Collection, Mapping
from typing import Any

from app.core.exceptions import InvalidConfiguration, SlotNotFound
from app.core.user_props import is_known_log_name, is_known_property
from app.schemas.top_x import SlotConfig, SourceType

logger = logging.getLogger(__name__)

# "1" and "VM1" both name slot 1
SLOT_KEY_PATTERN = re.compile(r"^(?:VM)?(\d+)$", re.IGNORECASE)

VALID_SOURCE_TYPES = {t.value for t in SourceType}


def parse_slot_id(key: Any) -> int:
    """
    Parse a configuration key into a slot number.

    Raises:
        InvalidConfiguration: If the key is not a slot identifier.
    """
    if isinstance(key, int) and not isinstance(key, bool) and key >= 0:
        return key
    if isinstance(key, str):
        match = SLOT_KEY_PATTERN.match(key.strip())
        if match:
            return int(match.group(1))
    raise InvalidConfiguration(
        "key is not a valid slot identifier",
        slot_id=str(key),
        field="slot",
    )


def _validate_days_back(slot_key: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidConfiguration(
            f"daysBack must be a non-negative integer, got {value!r}",
            slot_id=slot_key,
            field="daysBack",
        )


def validate_slot(slot_id: int, entry: Any) -> SlotConfig:
    """
    Validate one slot entry and build its frozen config.

    Does not check that the slot exists on screen; see validate_config.
    """
    slot_key = str(slot_id)

    if not isinstance(entry, Mapping):
        raise InvalidConfiguration(
            "slot entry must be an object",
            slot_id=slot_key,
            field="entry",
        )

    source_type = entry.get("type")
    if source_type not in VALID_SOURCE_TYPES:
        raise InvalidConfiguration(
            f"unknown source type {source_type!r}. "
            f"Must be one of: {', '.join(sorted(VALID_SOURCE_TYPES))}",
            slot_id=slot_key,
            field="type",
        )

    if source_type == SourceType.USER_PROP.value:
        prop_name = entry.get("propName")
        if not is_known_property(prop_name):
            raise InvalidConfiguration(
                f"unknown user property {prop_name!r}",
                slot_id=slot_key,
                field="propName",
            )
        return SlotConfig(
            slot_id=slot_id,
            source_type=SourceType.USER_PROP,
            prop_name=prop_name,
        )

    log_name = entry.get("logName")
    if not is_known_log_name(log_name):
        raise InvalidConfiguration(
            f"unknown event log name {log_name!r}",
            slot_id=slot_key,
            field="logName",
        )
    days_back = entry.get("daysBack")
    _validate_days_back(slot_key, days_back)

    return SlotConfig(
        slot_id=slot_id,
        source_type=SourceType.USER_EVENT_LOG,
        log_name=log_name,
        days_back=days_back,
    )


def validate_config(
    mci_map: Any,
    available_slots: Collection[int],
) -> dict[int, SlotConfig]:
    """
    Validate a full slot configuration against the current screen.

    Args:
        mci_map: Mapping of slot key ("1" or "VM1") to source descriptor.
        available_slots: Slot numbers that have a list region on screen.

    Returns:
        Slot number to config, in declaration order.

    Raises:
        InvalidConfiguration: If any entry is malformed.
        SlotNotFound: If an entry has no matching region.
    """
    if not isinstance(mci_map, Mapping) or not mci_map:
        raise InvalidConfiguration("mciMap must be a non-empty mapping", field="mciMap")

    configs: dict[int, SlotConfig] = {}
    for key, entry in mci_map.items():
        slot_id = parse_slot_id(key)
        if slot_id in configs:
            raise InvalidConfiguration(
                "slot is configured more than once",
                slot_id=str(slot_id),
                field="slot",
            )

        config = validate_slot(slot_id, entry)

        if slot_id not in available_slots:
            raise SlotNotFound(str(slot_id))

        configs[slot_id] = config

    logger.debug(f"Validated {len(configs)} leaderboard slot(s): {list(configs)}")
    return configs
