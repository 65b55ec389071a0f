"""Command for the Edit buttons on posted and scheduled standup confirmations."""

from __future__ import annotations

from typing import Optional

from app.commands.base_slack import BaseSlackCommand
from app.core.message_command import ChangeMessageCommand
from app.models.standup_status import StandupStatus
from app.schemas.standup import MessageType, PrivateMetadata, StandupViewData
from app.utils.datefunctions import from_epoch_millis


def view_data_from_status(
    pm: PrivateMetadata, status: Optional[StandupStatus]
) -> Optional[StandupViewData]:
    if status is None:
        return None
    return StandupViewData(
        pm=pm,
        yesterday=status.yesterday,
        today=status.today,
        parking_lot=status.parking_lot,
        attendees=status.parking_lot_attendees or [],
        pull_requests=status.pull_requests,
        schedule_date_str=status.schedule_date_str,
        schedule_time_str=status.schedule_time_str,
        timezone=status.timezone,
    )


class OpenEditModalCommand(BaseSlackCommand):
    """Open the standup modal prefilled with the stored status of a message."""

    async def execute(
        self, cmd: ChangeMessageCommand, trigger_id: str, message_type: MessageType
    ) -> dict:
        pm = PrivateMetadata(
            channel_id=cmd.channel_id,
            user_id=cmd.user_id,
            message_type=message_type,
            message_id=cmd.message_id,
            message_date=cmd.post_at,
        )
        status = self.status_service.get_status(
            cmd.channel_id, from_epoch_millis(cmd.post_at), cmd.user_id
        )
        if status is None:
            self.logger.info(
                "No stored status for message %s, opening an empty modal",
                cmd.message_id,
            )
        user = await self.platform.lookup_user(cmd.user_id)
        view = self.views.build_modal_view(pm, user, view_data_from_status(pm, status))
        await self.platform.open_modal_view(trigger_id, view)
        return view
