"""
Worker entry point over HTTP.

Accepts the same re-signed body the Celery task receives, so a
WorkerInvocation can also be replayed with a plain POST.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.commands.standup.handle_worker_event_command import HandleWorkerEventCommand
from app.core.delegation import DelegationSigner, parse_payload_body
from app.db import get_db
from app.routers.utils.dependencies import get_signer

logger = logging.getLogger(__name__)

worker_router = APIRouter(prefix="/worker", tags=["worker"])


@worker_router.post("/events")
async def worker_events(
    request: Request,
    signer: DelegationSigner = Depends(get_signer),
    db: Session = Depends(get_db),
) -> dict[str, str]:
    raw_body = (await request.body()).decode("utf-8")
    if not signer.verify(dict(request.headers), raw_body):
        raise HTTPException(status_code=401, detail="Invalid request signature")
    try:
        payload = parse_payload_body(raw_body)
        return await HandleWorkerEventCommand(db).execute(payload)
    except ValueError as e:
        logger.warning("Worker request parse error: %s", e)
        raise HTTPException(status_code=400, detail="Invalid worker payload") from e
