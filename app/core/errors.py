"""Domain exceptions shared by services, commands and routers."""

from __future__ import annotations

from typing import Optional


class UnknownTimezoneError(ValueError):
    """An IANA timezone name could not be resolved."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown timezone: {name!r}")
        self.name = name


class InvalidDateTimeError(ValueError):
    """A schedule date (YYYY-MM-DD) or time (HH:mm) string is malformed."""


class PlatformCallError(RuntimeError):
    """The chat platform rejected a call. Never retried."""

    def __init__(
        self, method: str, error: Optional[str] = None, detail: Optional[str] = None
    ) -> None:
        self.method = method
        self.error = error or "unknown_error"
        message = f"{method} failed: {self.error}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
