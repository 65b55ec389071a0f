"""
Compact transit token for buttons that change an existing standup message.

Serialized as `messageId#channelId#postAt#userId` to fit in a Slack button
value. Fields are not escaped, so a `#` inside any field breaks parsing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

SEPARATOR = "#"
FIELD_COUNT = 4


@dataclass(frozen=True)
class ChangeMessageCommand:
    message_id: str
    channel_id: str
    post_at: int  # epoch ms of the message (post time or scheduled time)
    user_id: str

    def format_for_transfer(self) -> str:
        return SEPARATOR.join(
            [self.message_id, self.channel_id, str(self.post_at), self.user_id]
        )

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["ChangeMessageCommand"]:
        """Return the command, or None when `raw` is not a well-formed token."""
        if not raw:
            return None
        parts = raw.split(SEPARATOR)
        if len(parts) != FIELD_COUNT:
            return None
        message_id, channel_id, post_at, user_id = parts
        try:
            post_at_ms = int(post_at)
        except ValueError:
            return None
        return cls(
            message_id=message_id,
            channel_id=channel_id,
            post_at=post_at_ms,
            user_id=user_id,
        )
