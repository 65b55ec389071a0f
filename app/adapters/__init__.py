"""Platform adapters for chat integrations."""

from app.adapters.base import ChatPlatformAdapter
from app.adapters.slack import SlackAdapter

__all__ = ["ChatPlatformAdapter", "SlackAdapter"]
