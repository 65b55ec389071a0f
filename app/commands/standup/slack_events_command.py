"""
Command behind the front door for Slack slash commands and interactions.

Slash commands and modal opening run inline, since a trigger_id is only valid
for a few seconds. Submissions and button presses are acknowledged at once
and handed to the worker, re-signed, unless the worker is disabled.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional
from urllib.parse import parse_qs

from app.commands.base_slack import BaseSlackCommand
from app.commands.standup.handle_worker_event_command import (
    VIEW_SUBMISSION,
    HandleWorkerEventCommand,
)
from app.commands.standup.open_standup_modal_command import OpenStandupModalCommand
from app.commands.standup.show_parking_lot_command import (
    ShowParkingLotCommand,
    SlashAction,
    parse_slash_text,
)
from app.core.delegation import DelegationSigner, delegate_to_worker, parse_payload_body
from app.core.errors import PlatformCallError
from app.schemas.standup import PrivateMetadata
from app.views.standup_views import STANDUP_VIEW_CALLBACK_ID

NOT_IN_CHANNEL_TEXT = (
    "Standup is not a member of this channel. Please try again after adding it. "
    "Add through *Integrations* or by mentioning it, like `@Standup`."
)


class SlackEventsCommand(BaseSlackCommand):
    """
    Handle one verified request to /slack/events.
    Returns the JSON body to acknowledge with, or None for an empty 200.
    """

    async def execute(
        self, raw_body: str, headers: Mapping[str, str], signer: DelegationSigner
    ) -> Optional[dict[str, Any]]:
        fields = parse_qs(raw_body, keep_blank_values=True)
        if "command" in fields:
            return await self._handle_slash_command(
                {k: v[0] for k, v in fields.items()}
            )

        payload = parse_payload_body(raw_body)
        view = payload.get("view") or {}
        if (
            payload.get("type") == VIEW_SUBMISSION
            and view.get("callback_id") == STANDUP_VIEW_CALLBACK_ID
        ):
            error_view = await self._check_bot_in_channel(payload)
            if error_view is not None:
                return {"response_action": "update", "view": error_view}

        if self.settings.worker_enabled:
            delegate_to_worker(signer, payload, headers)
        else:
            await self.sub_command(HandleWorkerEventCommand).execute(payload)
        return None

    async def _handle_slash_command(
        self, form: dict[str, str]
    ) -> Optional[dict[str, Any]]:
        for required in ("channel_id", "user_id"):
            if not form.get(required):
                raise ValueError(f"Slash command is missing {required}")
        action = parse_slash_text(form.get("text"))
        channel_id, user_id = form["channel_id"], form["user_id"]
        if action == SlashAction.OPEN_MODAL and not form.get("trigger_id"):
            raise ValueError("Slash command is missing trigger_id")
        try:
            if action == SlashAction.OPEN_MODAL:
                await self.sub_command(OpenStandupModalCommand).execute(
                    channel_id, user_id, form["trigger_id"]
                )
            else:
                await self.sub_command(ShowParkingLotCommand).execute(
                    action, channel_id, user_id
                )
        except PlatformCallError as e:
            self.logger.error("/standup %s failed: %s", action.value, e)
            return {
                "response_type": "ephemeral",
                "text": self.views.build_error_text(str(e)),
            }
        return None

    async def _check_bot_in_channel(
        self, payload: dict[str, Any]
    ) -> Optional[dict[str, Any]]:
        """Error view when the bot cannot post to the submission's channel."""
        bot_user_id = self.settings.slack_bot_user_id
        if not bot_user_id:
            return None
        try:
            pm = PrivateMetadata.from_transit(payload["view"]["private_metadata"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed standup submission: {e}") from e
        try:
            members = await self.platform.list_channel_members(pm.channel_id)
        except PlatformCallError as e:
            self.logger.warning(
                "Could not list members of %s: %s", pm.channel_id, e.error
            )
            members = []
        if bot_user_id in members:
            return None
        self.logger.error("Standup bot is not a member of channel %s", pm.channel_id)
        return self.views.build_error_view(NOT_IN_CHANNEL_TEXT)
