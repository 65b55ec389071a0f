"""
Command run by the worker for delegated Slack interactions.

Handles modal submissions of the standup view and the buttons of the
change-message block. Anything else is acknowledged and ignored.
"""

from __future__ import annotations

from typing import Any

from app.commands.base_slack import BaseSlackCommand
from app.commands.standup.delete_scheduled_message_command import (
    DeleteScheduledMessageCommand,
)
from app.commands.standup.open_edit_modal_command import OpenEditModalCommand
from app.commands.standup.submit_standup_command import SubmitStandupCommand
from app.core.errors import PlatformCallError
from app.core.message_command import ChangeMessageCommand
from app.schemas.standup import MessageType
from app.views.standup_views import (
    DELETE_SCHEDULED_MESSAGE,
    EDIT_MESSAGE,
    EDIT_SCHEDULED_MESSAGE,
    STANDUP_VIEW_CALLBACK_ID,
)

VIEW_SUBMISSION = "view_submission"
BLOCK_ACTIONS = "block_actions"

IGNORED = {"status": "ignored"}


class HandleWorkerEventCommand(BaseSlackCommand):
    async def execute(self, payload: dict[str, Any]) -> dict[str, str]:
        """
        Dispatch one interaction payload.

        Raises:
            ValueError: the payload is a standup submission but cannot be parsed.
        """
        kind = payload.get("type")
        if kind == VIEW_SUBMISSION:
            view = payload.get("view") or {}
            if view.get("callback_id") != STANDUP_VIEW_CALLBACK_ID:
                return IGNORED
            try:
                view_data = self.views.parse_view_submission(view)
            except (KeyError, TypeError) as e:
                raise ValueError(f"Malformed standup submission: {e}") from e
            command = self.sub_command(SubmitStandupCommand)
            result = await command.execute(view_data)
            return {"status": result.outcome.value}
        if kind == BLOCK_ACTIONS:
            return await self._handle_action(payload)
        self.logger.info("Ignoring worker event of type %s", kind)
        return IGNORED

    async def _handle_action(self, payload: dict[str, Any]) -> dict[str, str]:
        actions = payload.get("actions") or []
        if not actions:
            return IGNORED
        action = actions[0]
        action_id = action.get("action_id")
        cmd = ChangeMessageCommand.parse(action.get("value"))
        if cmd is None:
            self.logger.warning("Malformed change-message value for %s", action_id)
            return IGNORED

        trigger_id = payload.get("trigger_id")
        try:
            if action_id == DELETE_SCHEDULED_MESSAGE:
                command = self.sub_command(DeleteScheduledMessageCommand)
                deleted = await command.execute(cmd)
                return {"status": "deleted" if deleted else "failed"}
            if action_id in (EDIT_SCHEDULED_MESSAGE, EDIT_MESSAGE):
                self.logger.info("Edit request for message %s", cmd.message_id)
                message_type = (
                    MessageType.SCHEDULED
                    if action_id == EDIT_SCHEDULED_MESSAGE
                    else MessageType.POSTED
                )
                command = self.sub_command(OpenEditModalCommand)
                await command.execute(cmd, trigger_id, message_type)
                return {"status": "ok"}
        except PlatformCallError as e:
            self.logger.error("Action %s failed: %s", action_id, e)
            user_id = (payload.get("user") or {}).get("id") or cmd.user_id
            channel_id = (payload.get("channel") or {}).get("id") or cmd.channel_id
            await self.notify_error(channel_id, user_id, f"An error occurred: {e}")
            return {"status": "failed"}
        return IGNORED
