"""Celery beat task that purges expired notes and chats."""

from __future__ import annotations

from typing import Dict

from app.commands.sweep_expired_command import SweepExpiredCommand
from app.db import db_manager
from app.infra.celery_app import celery_app
from app.infra.logging_config import get_logger

logger = get_logger("sweep_task")


@celery_app.task(name="app.tasks.sweep_task.sweep_expired_task")
def sweep_expired_task() -> Dict[str, int]:
    """Run the expiry sweep over every note and chat."""
    logger.info("Scheduled sweep triggered")
    with db_manager.db_session() as db:
        result = SweepExpiredCommand(db).execute()
    return {"notes": result.notes, "chats": result.chats}
