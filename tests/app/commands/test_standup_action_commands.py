"""Tests for the button and slash-command driven standup commands."""

from datetime import datetime, timezone

import pytest

from app.commands.standup.delete_scheduled_message_command import (
    DeleteScheduledMessageCommand,
)
from app.commands.standup.open_edit_modal_command import OpenEditModalCommand
from app.commands.standup.open_standup_modal_command import OpenStandupModalCommand
from app.commands.standup.show_parking_lot_command import (
    ShowParkingLotCommand,
    SlashAction,
    parse_slash_text,
)
from app.core.message_command import ChangeMessageCommand
from app.models.mixins import utc_now
from app.schemas.standup import MessageType, PrivateMetadata, StandupStatusCreate
from app.services.parking_lot_service import ParkingLotService
from app.services.standup_status_service import StandupStatusService
from app.utils.datefunctions import to_epoch_millis
from app.views.standup_views import HELP_TEXT, SCHEDULE_DATE

SCHEDULED_AT = datetime(2020, 10, 20, 15, 8, tzinfo=timezone.utc)


@pytest.fixture
def scheduled_status(db):
    status = StandupStatusService(db).put_status(
        StandupStatusCreate(
            channel_id="C1",
            standup_date=SCHEDULED_AT,
            user_id="U1",
            yesterday="y",
            today="t",
            schedule_date_str="2020-10-20",
            schedule_time_str="09:08",
            message_id="Q1",
            message_type=MessageType.SCHEDULED,
            timezone="America/Denver",
        )
    )
    ParkingLotService(db).upsert_item("C1", SCHEDULED_AT, "U1", "topic", [])
    return status


@pytest.fixture
def scheduled_cmd():
    return ChangeMessageCommand(
        message_id="Q1",
        channel_id="C1",
        post_at=to_epoch_millis(SCHEDULED_AT),
        user_id="U1",
    )


@pytest.mark.asyncio
async def test_delete_scheduled_removes_records(
    db, platform, scheduled_status, scheduled_cmd
):
    deleted = await DeleteScheduledMessageCommand(db, platform).execute(scheduled_cmd)

    assert deleted is True
    assert platform.called("delete_scheduled_message") == [
        {"channel_id": "C1", "message_id": "Q1"}
    ]
    assert StandupStatusService(db).get_status("C1", SCHEDULED_AT, "U1") is None
    assert ParkingLotService(db).get_parking_lot("C1", SCHEDULED_AT).items == []
    notice = platform.called("post_ephemeral")[0]
    assert notice["text"].startswith("Your scheduled status was deleted")
    assert "10/20/2020 at 9:08 AM" in notice["text"]


@pytest.mark.asyncio
async def test_delete_scheduled_failure_keeps_records(
    db, platform, scheduled_status, scheduled_cmd
):
    platform.fail("delete_scheduled_message", "invalid_scheduled_message_id")

    deleted = await DeleteScheduledMessageCommand(db, platform).execute(scheduled_cmd)

    assert deleted is False
    assert StandupStatusService(db).get_status("C1", SCHEDULED_AT, "U1") is not None
    notice = platform.called("post_ephemeral")[0]
    assert "invalid_scheduled_message_id" in notice["text"]


@pytest.mark.asyncio
async def test_open_edit_modal_prefills_stored_status(
    db, platform, scheduled_status, scheduled_cmd
):
    view = await OpenEditModalCommand(db, platform).execute(
        scheduled_cmd, "trigger-1", MessageType.SCHEDULED
    )

    assert platform.called("open_modal_view")[0]["trigger_id"] == "trigger-1"
    pm = PrivateMetadata.from_transit(view["private_metadata"])
    assert pm.message_id == "Q1"
    assert pm.message_type == MessageType.SCHEDULED.value
    assert pm.message_date == scheduled_cmd.post_at
    blocks = {b["block_id"]: b for b in view["blocks"]}
    assert blocks["yesterday"]["element"]["initial_value"] == "y"
    assert blocks[SCHEDULE_DATE[0]]["element"]["initial_date"] == "2020-10-20"


@pytest.mark.asyncio
async def test_open_edit_modal_for_posted_hides_schedule(
    db, platform, setup_status
):
    cmd = ChangeMessageCommand(
        message_id=setup_status.message_id,
        channel_id=setup_status.channel_id,
        post_at=to_epoch_millis(setup_status.standup_date),
        user_id=setup_status.user_id,
    )
    view = await OpenEditModalCommand(db, platform).execute(
        cmd, "trigger-2", MessageType.POSTED
    )

    block_ids = [b["block_id"] for b in view["blocks"]]
    assert SCHEDULE_DATE[0] not in block_ids
    participants = next(
        b for b in view["blocks"] if b["block_id"] == "parking-lot-participants"
    )
    assert participants["element"]["initial_users"] == ["U1", "U2"]


@pytest.mark.asyncio
async def test_open_edit_modal_without_stored_status(db, platform, scheduled_cmd):
    view = await OpenEditModalCommand(db, platform).execute(
        scheduled_cmd, "trigger-3", MessageType.SCHEDULED
    )
    blocks = {b["block_id"]: b for b in view["blocks"]}
    assert "initial_value" not in blocks["yesterday"]["element"]


@pytest.mark.asyncio
async def test_open_standup_modal(db, platform):
    view = await OpenStandupModalCommand(db, platform).execute("C1", "U1", "trig")

    pm = PrivateMetadata.from_transit(view["private_metadata"])
    assert pm == PrivateMetadata(channel_id="C1", user_id="U1")
    assert view["callback_id"] == "standup_view"
    time_block = next(b for b in view["blocks"] if b["block_id"] == "schedule-time")
    assert time_block["element"]["timezone"] == "America/Denver"


@pytest.mark.parametrize(
    "text, action",
    [
        ("", SlashAction.OPEN_MODAL),
        (None, SlashAction.OPEN_MODAL),
        ("something else", SlashAction.OPEN_MODAL),
        ("help", SlashAction.HELP),
        ("parking-lot", SlashAction.SHOW_PARKING_LOT),
        ("parking_lot", SlashAction.SHOW_PARKING_LOT),
        ("parkinglot", SlashAction.SHOW_PARKING_LOT),
        ("-p", SlashAction.SHOW_PARKING_LOT),
        (" -p ", SlashAction.SHOW_PARKING_LOT),
        ("post parking-lot", SlashAction.POST_PARKING_LOT),
        ("post -p", SlashAction.POST_PARKING_LOT),
        ("post", SlashAction.OPEN_MODAL),
    ],
)
def test_parse_slash_text(text, action):
    assert parse_slash_text(text) == action


@pytest.mark.asyncio
async def test_help(db, platform):
    text = await ShowParkingLotCommand(db, platform).execute(
        SlashAction.HELP, "C1", "U1"
    )
    assert text == HELP_TEXT
    assert platform.called("post_ephemeral")[0]["text"] == HELP_TEXT


@pytest.mark.asyncio
async def test_show_parking_lot_ephemeral(db, platform):
    ParkingLotService(db).upsert_item("C1", utc_now(), "U1", "Talk about X", ["U2"])

    text = await ShowParkingLotCommand(db, platform).execute(
        SlashAction.SHOW_PARKING_LOT, "C1", "U9"
    )

    assert "*User U1*: Talk about X (<@U2>)" in text
    assert platform.called("post_ephemeral")[0]["user_id"] == "U9"
    assert not platform.called("post_message")


@pytest.mark.asyncio
async def test_post_parking_lot_to_channel(db, platform):
    text = await ShowParkingLotCommand(db, platform).execute(
        SlashAction.POST_PARKING_LOT, "C1", "U9"
    )

    assert "No parking lot items" in text
    assert platform.called("post_message")[0]["message"].text == text
