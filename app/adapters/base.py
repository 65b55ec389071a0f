"""
Chat platform adapter interface.

Adapters encapsulate platform-specific API calls and expose the normalized
contracts in app.schemas.chat. Every call may fail with PlatformCallError;
callers never retry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from app.schemas.chat import ChatMessage, PostedMessage, ScheduledMessage, UserInfo


class ChatPlatformAdapter(ABC):
    """Contract for chat platforms. New platforms implement this interface."""

    @abstractmethod
    async def post_message(self, message: ChatMessage) -> PostedMessage:
        """Post a message to a channel now."""
        ...

    @abstractmethod
    async def update_message(
        self, message: ChatMessage, message_id: str
    ) -> PostedMessage:
        """Replace the content of a posted message in place."""
        ...

    @abstractmethod
    async def schedule_message(
        self, message: ChatMessage, post_at: int
    ) -> ScheduledMessage:
        """Queue a message for delivery at `post_at` (epoch seconds)."""
        ...

    @abstractmethod
    async def delete_scheduled_message(self, channel_id: str, message_id: str) -> None:
        """Cancel a scheduled message. Fails if it already fired."""
        ...

    @abstractmethod
    async def post_ephemeral(
        self,
        channel_id: str,
        user_id: str,
        text: str,
        blocks: Optional[list[dict[str, Any]]] = None,
    ) -> None:
        """Send a message visible only to `user_id`."""
        ...

    @abstractmethod
    async def open_modal_view(self, trigger_id: str, view: dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def lookup_user(self, user_id: str) -> UserInfo:
        ...

    @abstractmethod
    async def list_channel_members(self, channel_id: str) -> list[str]:
        ...
