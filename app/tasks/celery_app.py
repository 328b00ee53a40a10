"""Celery application and beat schedule for background jobs."""
from celery import Celery
from celery.schedules import crontab

from app.core.config import settings

celery_app = Celery(
    "healthcamp",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["app.tasks.maintenance_tasks", "app.tasks.notification_tasks"],
)

celery_app.conf.update(
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "cleanup-expired-tokens": {
            "task": "app.tasks.maintenance_tasks.cleanup_expired_tokens",
            "schedule": crontab(hour=2, minute=0),
        },
        "deactivate-expired-camps": {
            "task": "app.tasks.maintenance_tasks.deactivate_expired_camps",
            "schedule": crontab(hour=0, minute=0),
        },
    },
)
