from fastapi import APIRouter
from sqlalchemy.exc import ArgumentError

from app.config import get_settings
from app.schemas.system import (
    AppGroup,
    DatabaseGroup,
    SlackGroup,
    SystemSettingsGrouped,
    WorkerGroup,
)

router = APIRouter(
    prefix="/system",
    tags=["system"],
    responses={404: {"description": "Not found"}},
)


@router.get("/settings", response_model=SystemSettingsGrouped)
def get_system_settings() -> SystemSettingsGrouped:
    """Grouped, non-sensitive configuration for troubleshooting."""
    s = get_settings()

    # Extract safe database info only (no credentials)
    database_host = None
    database_driver = None
    try:
        url_obj = s.database_url_obj
        database_host = url_obj.host
        database_driver = url_obj.get_backend_name()
    except (ArgumentError, ValueError):
        pass

    return SystemSettingsGrouped(
        app=AppGroup(
            name=s.app_name,
            environment=s.environment,
            log_level=s.log_level,
            port=s.port,
        ),
        database=DatabaseGroup(
            database_host=database_host,
            database_driver=database_driver,
            pool_size=s.database_pool_size,
            max_overflow=s.database_max_overflow,
        ),
        worker=WorkerGroup(
            worker_enabled=s.worker_enabled,
            purge_interval_seconds=s.purge_interval_seconds,
            redis_host=s.redis_host,
            redis_port=s.redis_port,
        ),
        # Secrets are reported as present/absent only
        slack=SlackGroup(
            bot_token_configured=bool(s.slack_bot_token),
            signing_secret_configured=bool(s.slack_signing_secret),
            bot_user_id=s.slack_bot_user_id,
        ),
    )
