"""Session scope helper for Celery tasks and scripts."""

from app.db import db_manager

db_session = db_manager.db_session

__all__ = ["db_session"]
