"""Command for the Delete button on a scheduled standup confirmation."""

from __future__ import annotations

from app.commands.base_slack import BaseSlackCommand
from app.core.errors import PlatformCallError
from app.core.message_command import ChangeMessageCommand
from app.utils.datefunctions import from_epoch_millis, print_in_zone

DELETED_TEXT = "Your scheduled status was deleted"


class DeleteScheduledMessageCommand(BaseSlackCommand):
    """
    Cancel a scheduled standup message.
    Records are only removed once the platform confirmed the cancellation.
    """

    async def execute(self, cmd: ChangeMessageCommand) -> bool:
        try:
            await self.platform.delete_scheduled_message(cmd.channel_id, cmd.message_id)
        except PlatformCallError as e:
            self.logger.warning(
                "Could not delete scheduled message %s: %s", cmd.message_id, e.error
            )
            await self.notify_error(
                cmd.channel_id,
                cmd.user_id,
                f"Unable to delete the scheduled status: {e.error}",
            )
            return False

        date = from_epoch_millis(cmd.post_at)
        status = self.status_service.get_status(cmd.channel_id, date, cmd.user_id)
        self.remove_status_records(cmd.channel_id, date, cmd.user_id)

        text = DELETED_TEXT
        if status is not None and status.timezone:
            due = print_in_zone(cmd.post_at, status.timezone)
            text = f"{DELETED_TEXT} (was due {due})"
        await self.notify(cmd.channel_id, cmd.user_id, text)
        self.logger.info("Deleted scheduled message %s", cmd.message_id)
        return True
