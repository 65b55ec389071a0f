from app.models.standup_parking_lot import StandupParkingLot
from app.models.standup_status import StandupStatus

__all__ = [
    "StandupParkingLot",
    "StandupStatus",
]
