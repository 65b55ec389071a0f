"""Read-only inspection of stored standup statuses and parking lots."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.schemas.standup import ParkingLotRead, StandupStatusRead
from app.services.parking_lot_service import ParkingLotService
from app.services.standup_status_service import StandupStatusService

standups_router = APIRouter(prefix="/standups", tags=["Standup"])


def _as_datetime(value: date) -> datetime:
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


@standups_router.get(
    "/{channel_id}/{standup_date}", response_model=List[StandupStatusRead]
)
def list_channel_statuses(
    channel_id: str,
    standup_date: date,
    db: Session = Depends(get_db),
) -> List[StandupStatusRead]:
    """All statuses of a channel for one standup day, ordered by user."""
    statuses = StandupStatusService(db).get_channel_statuses(
        channel_id, _as_datetime(standup_date)
    )
    return [StandupStatusRead.model_validate(s) for s in statuses]


@standups_router.get(
    "/{channel_id}/{standup_date}/parking-lot", response_model=ParkingLotRead
)
def get_parking_lot(
    channel_id: str,
    standup_date: date,
    db: Session = Depends(get_db),
) -> ParkingLotRead:
    parking_lot = ParkingLotService(db).get_parking_lot(
        channel_id, _as_datetime(standup_date)
    )
    if parking_lot is None:
        raise HTTPException(status_code=404, detail="Parking lot not found")
    return ParkingLotRead.model_validate(parking_lot)
