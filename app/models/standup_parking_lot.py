"""StandupParkingLot model: shared discussion items per channel per day."""

from __future__ import annotations

from sqlalchemy import JSON, Column, PrimaryKeyConstraint, String

from app.db import Base
from app.models.mixins import ExpiringMixin
from app.utils.db.types import UTCDateTime


class StandupParkingLot(Base, ExpiringMixin):
    """
    One row per channel per standup day, merged from every contributor.

    items is an ordered list of {"user_id", "content", "attendees"} dicts with
    at most one entry per user_id.
    """

    __tablename__ = "standup_parking_lots"

    __table_args__ = (PrimaryKeyConstraint("channel_id", "standup_date"),)

    channel_id = Column(String(64), nullable=False)
    standup_date = Column(UTCDateTime, nullable=False)
    items = Column(JSON, nullable=False, default=list)
