"""
Command for the `/standup` text arguments.

    help                       usage, visible only to the caller
    parking-lot                today's parking lot, visible only to the caller
    post parking-lot           today's parking lot, posted to the channel

`parking_lot`, `parkinglot` and `-p` are accepted in place of `parking-lot`.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from app.commands.base_slack import BaseSlackCommand
from app.models.mixins import utc_now
from app.schemas.chat import ChatMessage
from app.views.standup_views import HELP_TEXT, PARKING_LOT_ALIASES

POST_PREFIX = "post "


class SlashAction(str, Enum):
    OPEN_MODAL = "open_modal"
    HELP = "help"
    SHOW_PARKING_LOT = "show_parking_lot"
    POST_PARKING_LOT = "post_parking_lot"


def parse_slash_text(text: Optional[str]) -> SlashAction:
    """Map `/standup` arguments to an action. Anything unrecognised opens the modal."""
    args = (text or "").strip()
    if args == "help":
        return SlashAction.HELP
    if args in PARKING_LOT_ALIASES:
        return SlashAction.SHOW_PARKING_LOT
    if args.startswith(POST_PREFIX) and args[len(POST_PREFIX):] in PARKING_LOT_ALIASES:
        return SlashAction.POST_PARKING_LOT
    return SlashAction.OPEN_MODAL


class ShowParkingLotCommand(BaseSlackCommand):
    """Display help or the channel's parking lot for the current day."""

    async def execute(self, action: SlashAction, channel_id: str, user_id: str) -> str:
        if action == SlashAction.HELP:
            await self.platform.post_ephemeral(channel_id, user_id, HELP_TEXT)
            return HELP_TEXT

        items = await self.parking_lot_service.build_display_items(
            channel_id, utc_now(), self.platform
        )
        text = self.views.build_parking_lot_text(items)
        if action == SlashAction.POST_PARKING_LOT:
            message = ChatMessage(channel_id=channel_id, text=text)
            await self.platform.post_message(message)
        else:
            await self.platform.post_ephemeral(channel_id, user_id, text)
        return text
