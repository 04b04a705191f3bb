"""Celery tasks for best-effort creation statistics."""

from __future__ import annotations

from enum import StrEnum

from app.config import get_settings
from app.db import db_manager
from app.infra.celery_app import celery_app
from app.infra.logging_config import get_logger
from app.services.stats_service import StatsService

logger = get_logger("stats_task")


class StatsEvent(StrEnum):
    NOTE_CREATED = "note_created"
    CHAT_CREATED = "chat_created"


@celery_app.task(name="app.tasks.stats_task.record_note_task")
def record_note_task() -> bool:
    """Increment today's note counter."""
    with db_manager.db_session() as db:
        StatsService(db).record_note()
    return True


@celery_app.task(name="app.tasks.stats_task.record_chat_task")
def record_chat_task() -> bool:
    """Increment today's chat counter."""
    with db_manager.db_session() as db:
        StatsService(db).record_chat()
    return True


_EVENT_TASKS = {
    StatsEvent.NOTE_CREATED: record_note_task,
    StatsEvent.CHAT_CREATED: record_chat_task,
}


def dispatch_stats_event(event: StatsEvent) -> None:
    """
    Enqueue a stats increment without waiting on it.

    Broker failures are logged and dropped; creation responses never depend
    on stats.
    """
    if not get_settings().stats_enabled:
        return
    try:
        _EVENT_TASKS[event].delay()
    except Exception as e:
        logger.warning("Stats dispatch failed for %s: %s", event.value, e)
