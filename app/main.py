"""FastAPI application factory for the standup bot."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from app.config import get_settings
from app.infra.logging_config import LoggingConfig
from app.routers.slack import slack_router
from app.routers.standups_router import standups_router
from app.routers.system import router as system_router
from app.routers.worker import worker_router

logger = logging.getLogger(__name__)


def create_app(testing: bool = False) -> FastAPI:
    """
    Build the application.

    Args:
        testing: Skip process-wide logging setup so pytest keeps its handlers.
    """
    settings = get_settings()
    if not testing:
        LoggingConfig(settings.log_level)

    app = FastAPI(
        title="Standup Bot",
        description="Slack standup statuses, scheduling and parking lots",
        version="0.1.0",
    )
    app.include_router(slack_router)
    app.include_router(worker_router)
    app.include_router(standups_router)
    app.include_router(system_router)

    @app.get("/health", tags=["system"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    logger.info("Application created for environment %s", settings.environment)
    return app


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
