"""Service for standup status records (one per channel, day and user)."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.standup_status import StandupStatus
from app.schemas.standup import StandupStatusCreate, StandupStatusUpdate
from app.services.record_store import RecordKind, RecordStore

STANDUP_STATUS_KIND: RecordKind[StandupStatus] = RecordKind(
    name="standup_status",
    model=StandupStatus,
    key_fields=("channel_id", "standup_date", "user_id"),
    range_field="user_id",
)


class StandupStatusService:
    """Reads and writes standup statuses through the generic record store."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.store = RecordStore(db, STANDUP_STATUS_KIND)

    def get_status(
        self, channel_id: str, date: datetime, user_id: str
    ) -> Optional[StandupStatus]:
        return self.store.get(channel_id=channel_id, standup_date=date, user_id=user_id)

    def get_channel_statuses(
        self, channel_id: str, date: datetime
    ) -> List[StandupStatus]:
        """Every user's status for the channel on that standup day."""
        return self.store.query_by_partition(channel_id, date)

    def put_status(self, data: StandupStatusCreate) -> StandupStatus:
        return self.store.put(data)

    def update_status(self, data: StandupStatusUpdate) -> StandupStatus:
        return self.store.update(data)

    def remove_status(
        self, channel_id: str, date: datetime, user_id: str
    ) -> Optional[StandupStatus]:
        return self.store.delete(
            channel_id=channel_id, standup_date=date, user_id=user_id
        )

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        return self.store.purge_expired(now)
