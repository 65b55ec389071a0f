# Import celery app first
from app.infra.celery_app import celery_app

# Initialize logging configuration for Celery workers
from app.infra.logging_config import LoggingConfig
from app.tasks.purge_expired_task import purge_expired_records_task
from app.tasks.worker_event_task import process_worker_event_task

LoggingConfig()  # Initialize logging

__all__ = [
    "celery_app",
    "process_worker_event_task",
    "purge_expired_records_task",
]
