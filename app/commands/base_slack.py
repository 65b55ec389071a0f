"""
Base command for Slack-related operations.

Provides the configured SlackAdapter and the services shared by the
standup commands. Tests inject a fake platform through the constructor.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.adapters.base import ChatPlatformAdapter
from app.adapters.slack import SlackAdapter
from app.config import Settings, get_settings
from app.core.errors import PlatformCallError
from app.services.parking_lot_service import ParkingLotService
from app.services.standup_status_service import StandupStatusService
from app.views.standup_views import StandupViewBuilder


CommandT = TypeVar("CommandT", bound="BaseSlackCommand")


class BaseSlackCommand:
    """
    Base for standup commands.
    Holds the platform adapter, view builder and record services.
    """

    def __init__(
        self,
        db: Session,
        platform: Optional[ChatPlatformAdapter] = None,
        views: Optional[StandupViewBuilder] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.db = db
        self.settings = settings or get_settings()
        self.platform = platform or self.get_slack_adapter(self.settings)
        self.views = views or StandupViewBuilder(story_url=self.settings.story_url)
        self.status_service = StandupStatusService(db)
        self.parking_lot_service = ParkingLotService(db)
        self.logger = logging.getLogger(self.__class__.__module__)

    def sub_command(self, command_cls: Type[CommandT]) -> CommandT:
        """Build another command sharing this one's session, platform and settings."""
        return command_cls(self.db, self.platform, self.views, self.settings)

    @staticmethod
    def get_slack_adapter(settings: Optional[Settings] = None) -> SlackAdapter:
        """Return a SlackAdapter for the configured bot token."""
        settings = settings or get_settings()
        if not settings.slack_bot_token:
            raise RuntimeError("SLACK_BOT_TOKEN is not configured")
        return SlackAdapter(bot_token=settings.slack_bot_token)

    async def notify(
        self,
        channel_id: str,
        user_id: str,
        text: str,
        blocks: Optional[list[dict[str, Any]]] = None,
    ) -> None:
        """Ephemeral notice to the user. A failure here is logged, not raised."""
        try:
            await self.platform.post_ephemeral(channel_id, user_id, text, blocks)
        except PlatformCallError as e:
            self.logger.error("Could not notify %s in %s: %s", user_id, channel_id, e)

    async def notify_error(self, channel_id: str, user_id: str, message: str) -> None:
        await self.notify(channel_id, user_id, self.views.build_error_text(message))

    def remove_status_records(
        self, channel_id: str, date: datetime, user_id: str
    ) -> None:
        """Drop a user's status and parking lot item for a day. Errors are logged."""
        try:
            self.status_service.remove_status(channel_id, date, user_id)
            self.parking_lot_service.remove_item(channel_id, date, user_id)
        except SQLAlchemyError as e:
            self.logger.error(
                "Failed to remove records of %s in %s for %s: %s",
                user_id,
                channel_id,
                date,
                e,
            )
