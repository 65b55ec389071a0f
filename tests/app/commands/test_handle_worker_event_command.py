"""Tests for dispatching delegated interactions in the worker."""

from datetime import datetime, timezone

import pytest

from app.commands.standup.handle_worker_event_command import HandleWorkerEventCommand
from app.core.message_command import ChangeMessageCommand
from app.schemas.standup import PrivateMetadata
from app.services.standup_status_service import StandupStatusService
from app.models.mixins import utc_now
from app.utils.datefunctions import to_epoch_millis


def view_submission(pm: PrivateMetadata, callback_id: str = "standup_view") -> dict:
    return {
        "type": "view_submission",
        "user": {"id": pm.user_id},
        "view": {
            "callback_id": callback_id,
            "private_metadata": pm.to_transit(),
            "state": {
                "values": {
                    "yesterday": {"yesterday-action": {"value": "did X"}},
                    "today": {"today-action": {"value": "will do Y"}},
                    "parking-lot-participants": {
                        "parking-lot-participants-action": {"selected_users": []}
                    },
                    "schedule-date": {"schedule-date-action": {"selected_date": None}},
                    "schedule-time": {"schedule-time-action": {"selected_time": None}},
                }
            },
        },
    }


def block_action(action_id: str, value: str) -> dict:
    return {
        "type": "block_actions",
        "trigger_id": "trigger-9",
        "user": {"id": "U1"},
        "channel": {"id": "C1"},
        "actions": [
            {"action_id": action_id, "block_id": "change-msg", "value": value}
        ],
    }


@pytest.fixture
def command(db, platform):
    return HandleWorkerEventCommand(db, platform)


@pytest.mark.asyncio
async def test_view_submission_runs_submit(db, command, platform):
    pm = PrivateMetadata(channel_id="C1", user_id="U1")

    result = await command.execute(view_submission(pm))

    assert result == {"status": "posted"}
    record = StandupStatusService(db).get_status("C1", utc_now(), "U1")
    assert record.yesterday == "did X"


@pytest.mark.asyncio
async def test_other_views_are_ignored(command, platform):
    pm = PrivateMetadata(channel_id="C1", user_id="U1")
    result = await command.execute(view_submission(pm, callback_id="other"))
    assert result == {"status": "ignored"}
    assert platform.calls == []


@pytest.mark.asyncio
async def test_malformed_submission_raises_value_error(command):
    payload = {
        "type": "view_submission",
        "view": {"callback_id": "standup_view", "private_metadata": "{}"},
    }
    with pytest.raises(ValueError):
        await command.execute(payload)


@pytest.mark.asyncio
async def test_unknown_event_type_is_ignored(command):
    assert await command.execute({"type": "shortcut"}) == {"status": "ignored"}


@pytest.mark.asyncio
async def test_delete_button(command, platform):
    cmd = ChangeMessageCommand("Q1", "C1", to_epoch_millis(utc_now()), "U1")
    result = await command.execute(
        block_action("delete-scheduled-message", cmd.format_for_transfer())
    )
    assert result == {"status": "deleted"}
    assert platform.called("delete_scheduled_message")


@pytest.mark.asyncio
async def test_edit_button_opens_modal(command, platform):
    date = datetime(2020, 10, 20, tzinfo=timezone.utc)
    cmd = ChangeMessageCommand("1.2", "C1", to_epoch_millis(date), "U1")
    result = await command.execute(
        block_action("edit-message", cmd.format_for_transfer())
    )

    assert result == {"status": "ok"}
    opened = platform.called("open_modal_view")[0]
    assert opened["trigger_id"] == "trigger-9"
    pm = PrivateMetadata.from_transit(opened["view"]["private_metadata"])
    assert pm.message_type == "posted"


@pytest.mark.asyncio
async def test_edit_button_failure_notifies_user(command, platform):
    platform.fail("open_modal_view", "expired_trigger_id")
    cmd = ChangeMessageCommand("Q1", "C1", 0, "U1")

    result = await command.execute(
        block_action("edit-scheduled-message", cmd.format_for_transfer())
    )

    assert result == {"status": "failed"}
    assert "expired_trigger_id" in platform.called("post_ephemeral")[0]["text"]


@pytest.mark.asyncio
async def test_malformed_button_value_is_ignored(command, platform):
    result = await command.execute(block_action("edit-message", "not-a-token"))
    assert result == {"status": "ignored"}
    assert platform.calls == []
