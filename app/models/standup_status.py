"""StandupStatus model: one row per user per channel per standup day."""

from __future__ import annotations

from sqlalchemy import JSON, Column, PrimaryKeyConstraint, String, Text

from app.db import Base
from app.models.mixins import ExpiringMixin
from app.utils.db.types import UTCDateTime

MESSAGE_TYPE_POSTED = "posted"


class StandupStatus(Base, ExpiringMixin):
    """
    A user's standup for a channel and day.

    The (channel_id, standup_date) pair is the partition; user_id is the range
    key. schedule_* fields are only set while message_type is "scheduled".
    """

    __tablename__ = "standup_statuses"

    __table_args__ = (PrimaryKeyConstraint("channel_id", "standup_date", "user_id"),)

    channel_id = Column(String(64), nullable=False)
    standup_date = Column(UTCDateTime, nullable=False)
    user_id = Column(String(64), nullable=False)
    yesterday = Column(Text, nullable=False)
    today = Column(Text, nullable=False)
    parking_lot = Column(Text, nullable=True)
    pull_requests = Column(Text, nullable=True)
    parking_lot_attendees = Column(JSON, nullable=False, default=list)
    schedule_date_str = Column(String(10), nullable=True)  # YYYY-MM-DD
    schedule_time_str = Column(String(5), nullable=True)  # HH:mm
    message_id = Column(String(64), nullable=True)  # ts or scheduled_message_id
    message_type = Column(String(16), nullable=False, default=MESSAGE_TYPE_POSTED)
    timezone = Column(String(64), nullable=True)
