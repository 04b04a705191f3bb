"""Celery application: stats recording tasks and the periodic expiry sweep."""

from __future__ import annotations

from celery import Celery

from app.config import get_settings

settings = get_settings()

celery_app = Celery(
    settings.app_name,
    broker=settings.broker_url,
    backend=settings.result_backend,
    include=["app.tasks.stats_task", "app.tasks.sweep_task"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_ignore_result=True,
    broker_connection_retry_on_startup=True,
)

celery_app.conf.beat_schedule = {
    "sweep-expired-entities": {
        "task": "app.tasks.sweep_task.sweep_expired_task",
        "schedule": float(settings.sweep_interval_seconds),
    },
}
