"""Pydantic schemas for standup statuses, parking lots and view transit data."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


class MessageType(str, Enum):
    """State of the chat message behind a status."""

    POSTED = "posted"
    SCHEDULED = "scheduled"


def _unique_user_ids(user_ids: Optional[list[str]]) -> Optional[list[str]]:
    if user_ids is None:
        return None
    return list(dict.fromkeys(u for u in user_ids if u))


# Ordered, de-duplicated user ids (a "set" that keeps display order)
UserIds = Annotated[list[str], AfterValidator(_unique_user_ids)]


class ParkingLotItem(BaseModel):
    """One contributor's entry in a channel's parking lot."""

    user_id: str
    content: str = ""
    attendees: UserIds = Field(default_factory=list)


class StandupStatusCreate(BaseModel):
    """Full status payload for RecordStore.put (unconditional write)."""

    model_config = ConfigDict(use_enum_values=True)

    channel_id: str
    standup_date: datetime
    user_id: str
    yesterday: str
    today: str
    parking_lot: Optional[str] = None
    pull_requests: Optional[str] = None
    parking_lot_attendees: UserIds = Field(default_factory=list)
    schedule_date_str: Optional[str] = None
    schedule_time_str: Optional[str] = None
    message_id: Optional[str] = None
    message_type: MessageType = MessageType.POSTED
    timezone: Optional[str] = None


class StandupStatusUpdate(BaseModel):
    """
    Partial status payload for RecordStore.update.

    Only fields explicitly set on the instance are written; everything else is
    left as stored.
    """

    model_config = ConfigDict(use_enum_values=True)

    channel_id: str
    standup_date: datetime
    user_id: str
    yesterday: Optional[str] = None
    today: Optional[str] = None
    parking_lot: Optional[str] = None
    pull_requests: Optional[str] = None
    parking_lot_attendees: Optional[UserIds] = None
    schedule_date_str: Optional[str] = None
    schedule_time_str: Optional[str] = None
    message_id: Optional[str] = None
    message_type: Optional[MessageType] = None
    timezone: Optional[str] = None


class StandupStatusRead(BaseModel):
    channel_id: str
    standup_date: datetime
    user_id: str
    yesterday: str
    today: str
    parking_lot: Optional[str] = None
    pull_requests: Optional[str] = None
    parking_lot_attendees: UserIds = Field(default_factory=list)
    schedule_date_str: Optional[str] = None
    schedule_time_str: Optional[str] = None
    message_id: Optional[str] = None
    message_type: MessageType
    timezone: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    time_to_live: datetime

    model_config = {"from_attributes": True}


class ParkingLotCreate(BaseModel):
    channel_id: str
    standup_date: datetime
    items: list[ParkingLotItem] = Field(default_factory=list)


class ParkingLotUpdate(BaseModel):
    """Partial parking lot payload; an unset `items` leaves stored items alone."""

    channel_id: str
    standup_date: datetime
    items: Optional[list[ParkingLotItem]] = None


class ParkingLotRead(BaseModel):
    channel_id: str
    standup_date: datetime
    items: list[ParkingLotItem] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    time_to_live: datetime

    model_config = {"from_attributes": True}


class PrivateMetadata(BaseModel):
    """
    Transit metadata carried through a modal between opening and submission.

    message_id and message_date (epoch ms) are only present when editing an
    existing message. Never persisted.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    channel_id: str
    user_id: str
    message_type: MessageType = MessageType.POSTED
    message_id: Optional[str] = None
    message_date: Optional[int] = None

    @property
    def is_edit(self) -> bool:
        return bool(self.message_id)

    def to_transit(self) -> str:
        return self.model_dump_json(exclude_none=True)

    @classmethod
    def from_transit(cls, raw: str) -> "PrivateMetadata":
        return cls.model_validate_json(raw)


class StandupViewData(BaseModel):
    """Values submitted from the standup modal."""

    pm: PrivateMetadata
    yesterday: str
    today: str
    parking_lot: Optional[str] = None
    attendees: UserIds = Field(default_factory=list)
    pull_requests: Optional[str] = None
    schedule_date_str: Optional[str] = None
    schedule_time_str: Optional[str] = None
    timezone: Optional[str] = None

    @property
    def wants_schedule(self) -> bool:
        return bool(self.schedule_date_str and self.schedule_time_str)


class WorkerInvocation(BaseModel):
    """Request forwarded from the front door to the worker process."""

    body: str
    headers: dict[str, str] = Field(default_factory=dict)
    path: str = "/worker/events"
    method: str = "POST"
