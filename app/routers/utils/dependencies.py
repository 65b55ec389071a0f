"""Shared router dependencies."""

from __future__ import annotations

from fastapi import HTTPException

from app.config import get_settings
from app.core.delegation import DelegationSigner


def get_signer() -> DelegationSigner:
    """Signer for the configured Slack signing secret; 503 when it is missing."""
    settings = get_settings()
    if not settings.slack_signing_secret:
        raise HTTPException(
            status_code=503,
            detail="Slack integration is not configured",
        )
    return DelegationSigner(settings.slack_signing_secret)
