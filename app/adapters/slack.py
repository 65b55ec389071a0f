"""
Slack platform adapter.

Uses slack_sdk's AsyncWebClient. SlackApiError is translated into
PlatformCallError carrying Slack's error code (e.g. "not_in_channel").
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Optional

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient
from slack_sdk.web.async_slack_response import AsyncSlackResponse

from app.adapters.base import ChatPlatformAdapter
from app.core.errors import PlatformCallError
from app.schemas.chat import ChatMessage, PostedMessage, ScheduledMessage, UserInfo

logger = logging.getLogger(__name__)

MEMBERS_PAGE_SIZE = 200


class SlackAdapter(ChatPlatformAdapter):
    """Slack adapter: chat.*, views.open, users.info, conversations.members."""

    def __init__(
        self, bot_token: str, client: Optional[AsyncWebClient] = None
    ) -> None:
        self._bot_token = bot_token
        self._client = client

    def _get_client(self) -> AsyncWebClient:
        if self._client is None:
            self._client = AsyncWebClient(token=self._bot_token)
        return self._client

    async def _call(
        self, method: str, request: Awaitable[AsyncSlackResponse]
    ) -> AsyncSlackResponse:
        try:
            return await request
        except SlackApiError as e:
            error = e.response.get("error") if e.response is not None else None
            logger.warning("Slack %s failed: %s", method, error)
            raise PlatformCallError(method, error) from e

    async def post_message(self, message: ChatMessage) -> PostedMessage:
        kwargs: dict[str, Any] = {
            "channel": message.channel_id,
            "text": message.text,
            "blocks": message.blocks or None,
            "unfurl_links": False,
            "unfurl_media": False,
        }
        if message.username:
            kwargs["username"] = message.username
        if message.icon_url:
            kwargs["icon_url"] = message.icon_url
        resp = await self._call(
            "chat.postMessage", self._get_client().chat_postMessage(**kwargs)
        )
        return PostedMessage(
            channel_id=resp.get("channel") or message.channel_id,
            message_id=resp["ts"],
        )

    async def update_message(
        self, message: ChatMessage, message_id: str
    ) -> PostedMessage:
        resp = await self._call(
            "chat.update",
            self._get_client().chat_update(
                channel=message.channel_id,
                ts=message_id,
                text=message.text,
                blocks=message.blocks or None,
            ),
        )
        return PostedMessage(
            channel_id=resp.get("channel") or message.channel_id,
            message_id=resp.get("ts") or message_id,
        )

    async def schedule_message(
        self, message: ChatMessage, post_at: int
    ) -> ScheduledMessage:
        resp = await self._call(
            "chat.scheduleMessage",
            self._get_client().chat_scheduleMessage(
                channel=message.channel_id,
                post_at=post_at,
                text=message.text,
                blocks=message.blocks or None,
                unfurl_links=False,
                unfurl_media=False,
            ),
        )
        return ScheduledMessage(
            channel_id=resp.get("channel") or message.channel_id,
            message_id=resp["scheduled_message_id"],
            post_at=int(resp.get("post_at") or post_at),
        )

    async def delete_scheduled_message(self, channel_id: str, message_id: str) -> None:
        await self._call(
            "chat.deleteScheduledMessage",
            self._get_client().chat_deleteScheduledMessage(
                channel=channel_id, scheduled_message_id=message_id
            ),
        )

    async def post_ephemeral(
        self,
        channel_id: str,
        user_id: str,
        text: str,
        blocks: Optional[list[dict[str, Any]]] = None,
    ) -> None:
        await self._call(
            "chat.postEphemeral",
            self._get_client().chat_postEphemeral(
                channel=channel_id, user=user_id, text=text, blocks=blocks
            ),
        )

    async def open_modal_view(self, trigger_id: str, view: dict[str, Any]) -> None:
        await self._call(
            "views.open",
            self._get_client().views_open(trigger_id=trigger_id, view=view),
        )

    async def lookup_user(self, user_id: str) -> UserInfo:
        resp = await self._call(
            "users.info", self._get_client().users_info(user=user_id)
        )
        user = resp.get("user") or {}
        profile = user.get("profile") or {}
        return UserInfo(
            user_id=user_id,
            name=user.get("real_name") or profile.get("real_name") or user_id,
            image_url=profile.get("image_72"),
            timezone=user.get("tz"),
        )

    async def list_channel_members(self, channel_id: str) -> list[str]:
        members: list[str] = []
        cursor: Optional[str] = None
        while True:
            resp = await self._call(
                "conversations.members",
                self._get_client().conversations_members(
                    channel=channel_id, cursor=cursor, limit=MEMBERS_PAGE_SIZE
                ),
            )
            members.extend(resp.get("members") or [])
            cursor = (resp.get("response_metadata") or {}).get("next_cursor")
            if not cursor:
                return members
