"""
Generic persistence for records keyed by channel and standup day.

One store class serves every record kind; a RecordKind describes the model
and its key layout. Every write goes through `normalize`, which pins
standup_date to UTC midnight and recomputes time_to_live from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.mixins import utc_now
from app.utils.datefunctions import time_to_live_for, zero_utc

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType")


@dataclass(frozen=True)
class RecordKind(Generic[ModelType]):
    """Model class plus its primary key; range_field orders partition scans."""

    name: str
    model: Type[ModelType]
    key_fields: tuple[str, ...]
    range_field: Optional[str] = None


def normalize(values: dict[str, Any], now: Optional[datetime] = None) -> dict[str, Any]:
    """Zero standup_date (defaulting to today) and derive time_to_live from it."""
    standup_date = values.get("standup_date") or now or utc_now()
    values["standup_date"] = zero_utc(standup_date)
    values["time_to_live"] = time_to_live_for(values["standup_date"])
    return values


class RecordStore(Generic[ModelType]):
    """
    put/update/get/query/delete for one record kind.

    Writes are last-write-wins: there is no version check, so concurrent
    read-modify-write cycles on the same key can lose updates. Read failures
    are logged and reported as "not found".
    """

    def __init__(self, db: Session, kind: RecordKind[ModelType]) -> None:
        self.db = db
        self.kind = kind

    @property
    def model(self) -> Type[ModelType]:
        return self.kind.model

    def _key(self, values: dict[str, Any]) -> dict[str, Any]:
        missing = [f for f in self.kind.key_fields if values.get(f) is None]
        if missing:
            raise ValueError(f"{self.kind.name} key is missing {', '.join(missing)}")
        return {f: values[f] for f in self.kind.key_fields}

    def _commit(self, record: ModelType) -> ModelType:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(record)
        return record

    def put(self, data: BaseModel) -> ModelType:
        """Unconditional write of the full record. created_at survives overwrites."""
        now = utc_now()
        values = normalize(data.model_dump(), now)
        key = self._key(values)
        record = self.db.get(self.model, key)
        if record is None:
            record = self.model(**values, created_at=now, updated_at=now)
            self.db.add(record)
        else:
            for field, value in values.items():
                setattr(record, field, value)
            record.updated_at = now
        logger.debug(
            "Storing %s %s with date %s", self.kind.name, key, values["standup_date"]
        )
        return self._commit(record)

    def update(self, data: BaseModel) -> ModelType:
        """Write only the fields set on `data`; unset fields keep their stored value."""
        now = utc_now()
        values = normalize(data.model_dump(exclude_unset=True), now)
        key = self._key(values)
        record = self.db.get(self.model, key)
        if record is None:
            record = self.model(**values, created_at=now, updated_at=now)
            self.db.add(record)
        else:
            for field, value in values.items():
                if field in key:
                    continue
                setattr(record, field, value)
            record.updated_at = now
        logger.debug("Updating %s %s fields %s", self.kind.name, key, sorted(values))
        return self._commit(record)

    def get(self, **key: Any) -> Optional[ModelType]:
        """Point lookup by full key; standup_date is zeroed before lookup."""
        key["standup_date"] = zero_utc(key["standup_date"])
        try:
            return self.db.get(self.model, self._key(key))
        except SQLAlchemyError as e:
            logger.warning("Lookup of %s %s failed: %s", self.kind.name, key, e)
            self.db.rollback()
            return None

    def query_by_partition(self, channel_id: str, date: datetime) -> List[ModelType]:
        """All records sharing channel_id and the standup day of `date`."""
        standup_date = zero_utc(date)
        query = self.db.query(self.model).filter(
            self.model.channel_id == channel_id,
            self.model.standup_date == standup_date,
        )
        if self.kind.range_field:
            query = query.order_by(getattr(self.model, self.kind.range_field))
        try:
            return query.all()
        except SQLAlchemyError as e:
            logger.warning(
                "Query of %s %s/%s failed: %s",
                self.kind.name,
                channel_id,
                standup_date,
                e,
            )
            self.db.rollback()
            return []

    def delete(self, **key: Any) -> Optional[ModelType]:
        """Remove and return the record, or None when there is nothing to remove."""
        record = self.get(**key)
        if record is None:
            return None
        self.db.delete(record)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return record

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Delete every record whose time_to_live has passed (exclusive boundary)."""
        cutoff = now or utc_now()
        try:
            count = (
                self.db.query(self.model)
                .filter(self.model.time_to_live <= cutoff)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return count
