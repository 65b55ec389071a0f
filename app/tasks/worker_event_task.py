"""Task for processing Slack interactions delegated by the front door."""

from __future__ import annotations

import asyncio
from typing import Dict, Optional

from pydantic import ValidationError

from app.commands.standup.handle_worker_event_command import HandleWorkerEventCommand
from app.config import get_settings
from app.core.delegation import DelegationSigner, parse_payload_body
from app.infra.celery_app import celery_app
from app.infra.logging_config import get_logger
from app.schemas.standup import WorkerInvocation
from app.utils.db.db_session_helper import db_session

logger = get_logger("worker_event_task")


@celery_app.task(name="app.tasks.worker_event_task.process_worker_event_task")
def process_worker_event_task(invocation: Dict) -> Optional[str]:
    """
    Verify and run a delegated interaction.

    The signature is checked again here, over the forwarded body, exactly as
    the front door checked the original request.

    Args:
        invocation: WorkerInvocation as a dict (body, headers, path, method).

    Returns:
        Optional[str]: The handler status, or None when the invocation is rejected.
    """
    try:
        request = WorkerInvocation.model_validate(invocation)
    except ValidationError as e:
        logger.warning("Invalid worker invocation: %s", e)
        return None

    settings = get_settings()
    signer = DelegationSigner(settings.slack_signing_secret)
    if not signer.verify(request.headers, request.body):
        logger.warning("Rejected worker invocation with an invalid signature")
        return None

    try:
        payload = parse_payload_body(request.body)
    except ValueError as e:
        logger.warning("Invalid worker payload: %s", e)
        return None

    with db_session() as db:
        command = HandleWorkerEventCommand(db)
        result = asyncio.run(command.execute(payload))

    logger.info("Worker event %s handled: %s", payload.get("type"), result["status"])
    return result["status"]
