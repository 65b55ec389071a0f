"""Tests for the change-message transit token."""

import pytest

from app.core.message_command import ChangeMessageCommand


def test_format_for_transfer():
    cmd = ChangeMessageCommand(
        message_id="Q123", channel_id="C1", post_at=1603206480000, user_id="U1"
    )
    assert cmd.format_for_transfer() == "Q123#C1#1603206480000#U1"


def test_parse_formatted_token():
    cmd = ChangeMessageCommand(
        message_id="1603206480.000100",
        channel_id="C1",
        post_at=1603206480000,
        user_id="U1",
    )
    assert ChangeMessageCommand.parse(cmd.format_for_transfer()) == cmd


@pytest.mark.parametrize(
    "raw",
    [None, "", "Q123#C1#1603206480000", "Q123#C1#160#U1#extra", "Q123#C1#soon#U1"],
)
def test_parse_malformed_returns_none(raw):
    assert ChangeMessageCommand.parse(raw) is None
