"""
Normalized chat-platform contracts.

Commands build ChatMessage values and receive PostedMessage /
ScheduledMessage results; adapters translate to and from the platform API.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class UserInfo(BaseModel):
    """Subset of a chat user's profile used for rendering and timezones."""

    user_id: str
    name: str
    image_url: Optional[str] = None
    timezone: Optional[str] = None  # IANA name, e.g. "America/Denver"


class ChatMessage(BaseModel):
    """A message to post, update or schedule in a channel."""

    channel_id: str
    text: str
    blocks: list[dict[str, Any]] = Field(default_factory=list)
    username: Optional[str] = None  # post as the submitting user
    icon_url: Optional[str] = None


class PostedMessage(BaseModel):
    """Result of posting or updating a message. message_id is the platform ts."""

    channel_id: str
    message_id: str


class ScheduledMessage(BaseModel):
    """Result of scheduling a message; post_at is epoch seconds."""

    channel_id: str
    message_id: str
    post_at: int
