"""Periodic purge of standup records past their time_to_live."""

from __future__ import annotations

from app.infra.celery_app import celery_app
from app.infra.logging_config import get_logger
from app.services.parking_lot_service import ParkingLotService
from app.services.standup_status_service import StandupStatusService
from app.utils.db.db_session_helper import db_session

logger = get_logger("purge_expired")


@celery_app.task(name="app.tasks.purge_expired_task.purge_expired_records_task")
def purge_expired_records_task() -> int:
    """Delete expired statuses and parking lots. Returns the number of rows removed."""
    with db_session() as db:
        statuses = StandupStatusService(db).purge_expired()
        parking_lots = ParkingLotService(db).purge_expired()

    logger.info(
        "Purged %d expired statuses and %d expired parking lots",
        statuses,
        parking_lots,
    )
    return statuses + parking_lots
