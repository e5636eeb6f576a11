"""Top X leaderboard schemas for configuration and request/response validation."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceType(str, Enum):
    """Where a leaderboard slot gets its scores from."""

    USER_PROP = "userProp"
    USER_EVENT_LOG = "userEventLog"


class SlotConfig(BaseModel):
    """A validated leaderboard slot. Immutable for the duration of a render."""

    model_config = ConfigDict(frozen=True)

    slot_id: int = Field(..., ge=0)
    source_type: SourceType
    prop_name: Optional[str] = None
    log_name: Optional[str] = None
    days_back: Optional[int] = Field(None, ge=0)

    @property
    def region_name(self) -> str:
        """Name of the list view this slot renders into."""
        return f"VM{self.slot_id}"

    @property
    def source_name(self) -> str:
        if self.source_type == SourceType.USER_PROP:
            return self.prop_name or ""
        return self.log_name or ""


class ScreenRegion(BaseModel):
    """A list view available on the current screen."""

    model_config = ConfigDict(populate_by_name=True)

    slot_id: int = Field(..., alias="slotId", ge=0)
    height: Optional[int] = Field(None, description="Visible rows; used as the row limit")


class RenderRequest(BaseModel):
    """Schema for a screen render request."""

    model_config = ConfigDict(populate_by_name=True)

    mci_map: dict[str, Any] = Field(..., alias="mciMap")
    regions: list[ScreenRegion]


class LeaderboardEntryResponse(BaseModel):
    """Schema for a hydrated leaderboard entry."""

    user_id: int
    user_name: str
    real_name: str
    location: str
    affiliations: str
    value: int

    model_config = ConfigDict(from_attributes=True)


class SlotResponse(BaseModel):
    """Schema for one rendered slot."""

    slot_id: int
    region: str
    entries: list[LeaderboardEntryResponse]
    error: Optional[str] = None


class RenderResponse(BaseModel):
    """Schema for a rendered screen."""

    slots: list[SlotResponse]


class SourcesResponse(BaseModel):
    """Schema listing the names a slot may reference."""

    properties: list[str]
    log_names: list[str]
