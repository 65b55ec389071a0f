"""Grouped, non-sensitive configuration for troubleshooting."""

from typing import Optional

from pydantic import BaseModel


class AppGroup(BaseModel):
    name: str
    environment: str
    log_level: str
    port: int


class DatabaseGroup(BaseModel):
    database_host: Optional[str] = None
    database_driver: Optional[str] = None
    pool_size: int
    max_overflow: int


class WorkerGroup(BaseModel):
    worker_enabled: bool
    purge_interval_seconds: int
    redis_host: str
    redis_port: int


class SlackGroup(BaseModel):
    bot_token_configured: bool
    signing_secret_configured: bool
    bot_user_id: Optional[str] = None


class SystemSettingsGrouped(BaseModel):
    app: AppGroup
    database: DatabaseGroup
    worker: WorkerGroup
    slack: SlackGroup
