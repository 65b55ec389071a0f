"""
Front door for Slack: slash commands and interactivity.

Slack POSTs form-encoded bodies here and expects an answer within three
seconds. Every request is signature-checked against the raw body before
anything is parsed.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from app.commands.standup.slack_events_command import SlackEventsCommand
from app.core.delegation import DelegationSigner
from app.db import get_db
from app.routers.utils.dependencies import get_signer

logger = logging.getLogger(__name__)

slack_router = APIRouter(prefix="/slack", tags=["slack"])


@slack_router.post("/events")
async def slack_events(
    request: Request,
    signer: DelegationSigner = Depends(get_signer),
    db: Session = Depends(get_db),
):
    """Verify, then answer slash commands inline and delegate interactions."""
    raw_body = (await request.body()).decode("utf-8")
    headers = dict(request.headers)
    if not signer.verify(headers, raw_body):
        raise HTTPException(status_code=401, detail="Invalid request signature")
    try:
        result = await SlackEventsCommand(db).execute(raw_body, headers, signer)
    except ValueError as e:
        logger.warning("Slack request parse error: %s", e)
        raise HTTPException(status_code=400, detail="Invalid Slack request") from e
    if result is None:
        return Response(status_code=200)
    return result
