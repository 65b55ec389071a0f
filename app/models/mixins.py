from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column

from app.utils.db.types import UTCDateTime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """created_at / updated_at, both timezone-aware UTC."""

    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now)


class ExpiringMixin(TimestampMixin):
    """Exclusive expiry boundary honored by the periodic purge task."""

    time_to_live = Column(UTCDateTime, nullable=False, index=True)
