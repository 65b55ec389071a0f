"""Tests for the parking lot merge."""

from datetime import datetime, timezone

import pytest

from app.schemas.standup import ParkingLotRead
from app.services.parking_lot_service import ParkingLotService

DAY = datetime(2020, 10, 20, 14, 0, tzinfo=timezone.utc)


def item_tuples(record):
    return [(i["user_id"], i["content"], i["attendees"]) for i in record.items]


def test_upsert_creates_record(db):
    svc = ParkingLotService(db)
    record = svc.upsert_item("C1", DAY, "A", "Talk about X", ["B"])

    assert record.standup_date == datetime(2020, 10, 20, tzinfo=timezone.utc)
    assert item_tuples(record) == [("A", "Talk about X", ["B"])]


def test_upsert_appends_other_users(db):
    svc = ParkingLotService(db)
    svc.upsert_item("C1", DAY, "A", "Talk about X", [])
    record = svc.upsert_item("C1", DAY, "B", "Talk about Y", ["A"])

    assert item_tuples(record) == [
        ("A", "Talk about X", []),
        ("B", "Talk about Y", ["A"]),
    ]


def test_upsert_replaces_in_place(db):
    svc = ParkingLotService(db)
    svc.upsert_item("C1", DAY, "A", "first", [])
    svc.upsert_item("C1", DAY, "B", "second", [])
    record = svc.upsert_item("C1", DAY, "A", "first, revised", ["B"])

    assert item_tuples(record) == [
        ("A", "first, revised", ["B"]),
        ("B", "second", []),
    ]


def test_upsert_attendees_only(db):
    svc = ParkingLotService(db)
    record = svc.upsert_item("C1", DAY, "A", None, ["B", "B", "C"])
    assert item_tuples(record) == [("A", "", ["B", "C"])]


def test_upsert_without_content_or_attendees_is_noop(db):
    svc = ParkingLotService(db)
    assert svc.upsert_item("C1", DAY, "A", "", []) is None
    assert svc.upsert_item("C1", DAY, "A", None, []) is None
    assert svc.get_parking_lot("C1", DAY) is None


def test_remove_item(db):
    svc = ParkingLotService(db)
    svc.upsert_item("C1", DAY, "A", "first", [])
    svc.upsert_item("C1", DAY, "B", "second", [])

    record = svc.remove_item("C1", DAY, "A")
    assert item_tuples(record) == [("B", "second", [])]


def test_remove_item_missing_record_or_item(db):
    svc = ParkingLotService(db)
    assert svc.remove_item("C1", DAY, "A") is None

    svc.upsert_item("C1", DAY, "B", "second", [])
    assert svc.remove_item("C1", DAY, "A") is None
    assert item_tuples(svc.get_parking_lot("C1", DAY)) == [("B", "second", [])]


def test_concurrent_upserts_lose_an_update(db, monkeypatch):
    """
    There is no locking: a writer working from a snapshot taken before
    another user's upsert overwrites that user's item.
    """
    svc = ParkingLotService(db)
    svc.upsert_item("C1", DAY, "A", "first", [])
    stale = ParkingLotRead.model_validate(svc.get_parking_lot("C1", DAY))

    svc.upsert_item("C1", DAY, "B", "second", [])
    monkeypatch.setattr(svc, "get_parking_lot", lambda channel_id, date: stale)
    svc.upsert_item("C1", DAY, "A", "first, revised", [])
    monkeypatch.undo()

    record = svc.get_parking_lot("C1", DAY)
    assert item_tuples(record) == [("A", "first, revised", [])]


@pytest.mark.asyncio
async def test_build_display_items(db, platform):
    svc = ParkingLotService(db)
    svc.upsert_item("C1", DAY, "A", "first", ["B"])
    svc.upsert_item("C1", DAY, "B", "second", [])

    items = await svc.build_display_items("C1", DAY, platform)

    assert [(i.user_name, i.content, i.attendee_ids) for i in items] == [
        ("User A", "first", ["B"]),
        ("User B", "second", []),
    ]
    assert sorted(c["user_id"] for c in platform.called("lookup_user")) == ["A", "B"]


@pytest.mark.asyncio
async def test_build_display_items_empty(db, platform):
    assert await ParkingLotService(db).build_display_items("C1", DAY, platform) == []


def test_purge_expired(db):
    svc = ParkingLotService(db)
    svc.upsert_item("C1", DAY, "A", "first", [])
    assert svc.purge_expired(datetime(2020, 10, 22, tzinfo=timezone.utc)) == 1
    db.expunge_all()
    assert svc.get_parking_lot("C1", DAY) is None
