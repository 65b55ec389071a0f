"""Command for `/standup` without arguments: open an empty modal."""

from __future__ import annotations

from app.commands.base_slack import BaseSlackCommand
from app.schemas.standup import PrivateMetadata


class OpenStandupModalCommand(BaseSlackCommand):
    async def execute(self, channel_id: str, user_id: str, trigger_id: str) -> dict:
        pm = PrivateMetadata(channel_id=channel_id, user_id=user_id)
        user = await self.platform.lookup_user(user_id)
        view = self.views.build_modal_view(pm, user)
        await self.platform.open_modal_view(trigger_id, view)
        return view
