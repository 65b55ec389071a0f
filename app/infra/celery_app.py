"""Celery application: worker-event delegation and periodic TTL purge."""

from celery import Celery

from app.config import get_settings

settings = get_settings()

celery_app = Celery(
    settings.app_name,
    broker=settings.broker_url,
    include=[
        "app.tasks.worker_event_task",
        "app.tasks.purge_expired_task",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_backend=None,
    task_ignore_result=True,
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "purge-expired-standup-records": {
            "task": "app.tasks.purge_expired_task.purge_expired_records_task",
            "schedule": float(settings.purge_interval_seconds),
        },
    },
)
