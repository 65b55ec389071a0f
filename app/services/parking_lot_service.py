"""
Service for the shared parking lot of a channel's standup day.

Each contributor owns at most one item. Upserts are a read-modify-write with
no locking: two users saving at the same moment race and the later write
wins, dropping the other item.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Sequence

from sqlalchemy.orm import Session

from app.models.standup_parking_lot import StandupParkingLot
from app.schemas.standup import (
    ParkingLotCreate,
    ParkingLotItem,
    ParkingLotUpdate,
)
from app.services.record_store import RecordKind, RecordStore
from app.utils.datefunctions import zero_utc

if TYPE_CHECKING:
    from app.adapters.base import ChatPlatformAdapter

logger = logging.getLogger(__name__)

PARKING_LOT_KIND: RecordKind[StandupParkingLot] = RecordKind(
    name="standup_parking_lot",
    model=StandupParkingLot,
    key_fields=("channel_id", "standup_date"),
)


@dataclass
class ParkingLotDisplayItem:
    user_name: str
    content: str
    attendee_ids: List[str] = field(default_factory=list)


class ParkingLotService:
    """Manages the per-channel, per-day parking lot record."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.store = RecordStore(db, PARKING_LOT_KIND)

    def get_parking_lot(
        self, channel_id: str, date: datetime
    ) -> Optional[StandupParkingLot]:
        return self.store.get(channel_id=channel_id, standup_date=date)

    def put_parking_lot(self, data: ParkingLotCreate) -> StandupParkingLot:
        return self.store.put(data)

    def update_parking_lot(self, data: ParkingLotUpdate) -> StandupParkingLot:
        return self.store.update(data)

    def upsert_item(
        self,
        channel_id: str,
        date: datetime,
        user_id: str,
        content: Optional[str],
        attendees: Sequence[str],
    ) -> Optional[StandupParkingLot]:
        """
        Add or replace `user_id`'s item in the channel's parking lot for `date`.

        Returns None without writing anything when there is neither content
        nor attendees. An existing item keeps its position in the list.
        """
        if not content and not attendees:
            return None

        item = ParkingLotItem(
            user_id=user_id, content=content or "", attendees=list(attendees)
        )
        existing = self.get_parking_lot(channel_id, date)
        if existing is None:
            return self.put_parking_lot(
                ParkingLotCreate(
                    channel_id=channel_id, standup_date=zero_utc(date), items=[item]
                )
            )

        items = [ParkingLotItem.model_validate(i) for i in existing.items or []]
        index = next((n for n, i in enumerate(items) if i.user_id == user_id), None)
        if index is None:
            items.append(item)
        else:
            items[index] = item
        return self.update_parking_lot(
            ParkingLotUpdate(
                channel_id=channel_id, standup_date=existing.standup_date, items=items
            )
        )

    def remove_item(
        self, channel_id: str, date: datetime, user_id: str
    ) -> Optional[StandupParkingLot]:
        """Remove `user_id`'s item. Returns None when there was nothing to remove."""
        existing = self.get_parking_lot(channel_id, date)
        if existing is None:
            logger.info(
                "No parking lot for channel %s on %s", channel_id, zero_utc(date)
            )
            return None

        items = [ParkingLotItem.model_validate(i) for i in existing.items or []]
        remaining = [i for i in items if i.user_id != user_id]
        if len(remaining) == len(items):
            logger.info(
                "No parking lot item for user %s in channel %s on %s",
                user_id,
                channel_id,
                existing.standup_date,
            )
            return None
        return self.update_parking_lot(
            ParkingLotUpdate(
                channel_id=channel_id,
                standup_date=existing.standup_date,
                items=remaining,
            )
        )

    async def build_display_items(
        self, channel_id: str, date: datetime, platform: "ChatPlatformAdapter"
    ) -> List[ParkingLotDisplayItem]:
        """Resolve contributor names concurrently for display."""
        parking_lot = self.get_parking_lot(channel_id, date)
        if parking_lot is None:
            return []
        items = [ParkingLotItem.model_validate(i) for i in parking_lot.items or []]
        users = await asyncio.gather(
            *(platform.lookup_user(item.user_id) for item in items)
        )
        return [
            ParkingLotDisplayItem(
                user_name=user.name, content=item.content, attendee_ids=item.attendees
            )
            for item, user in zip(items, users)
        ]

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        return self.store.purge_expired(now)
