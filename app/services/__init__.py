from app.services.parking_lot_service import ParkingLotService
from app.services.record_store import RecordKind, RecordStore
from app.services.standup_status_service import StandupStatusService

__all__ = [
    "ParkingLotService",
    "RecordKind",
    "RecordStore",
    "StandupStatusService",
]
