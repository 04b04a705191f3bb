# Import celery app first
from app.infra.celery_app import celery_app

# Initialize logging configuration for Celery workers
from app.infra.logging_config import LoggingConfig
from app.tasks.stats_task import record_chat_task, record_note_task
from app.tasks.sweep_task import sweep_expired_task

LoggingConfig()  # Initialize logging

__all__ = [
    "celery_app",
    "record_chat_task",
    "record_note_task",
    "sweep_expired_task",
]
