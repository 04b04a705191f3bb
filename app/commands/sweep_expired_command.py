"""Command to purge every expired note and chat."""

from __future__ import annotations

import logging
from typing import Optional, Type, Union

from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.tokens import now_ms
from app.schemas.maintenance import SweepResult
from app.services.chat_store import ChatStore
from app.services.note_store import NoteStore

StoreClass = Type[Union[NoteStore, ChatStore]]


class SweepExpiredCommand:
    """
    Ask each expired note and chat to clean itself up.

    Read and write paths only sweep the entity they touch; this is what
    reclaims entities that expire without ever being accessed. Each purge
    goes through the store so it serializes with in-flight operations on
    the same entity.
    """

    def __init__(self, db: Session, batch_size: Optional[int] = None) -> None:
        self.db = db
        self.batch_size = batch_size or get_settings().sweep_batch_size
        self.logger = logging.getLogger(__name__)

    def execute(self, now: Optional[int] = None) -> SweepResult:
        """
        Args:
            now: Cutoff in epoch ms; defaults to the current time.

        Returns:
            SweepResult: number of notes and chats removed.
        """
        cutoff = now if now is not None else now_ms()
        notes = self._sweep(NoteStore, cutoff)
        chats = self._sweep(ChatStore, cutoff)
        self.logger.info("Sweep removed %d notes and %d chats", notes, chats)
        return SweepResult(notes=notes, chats=chats)

    def _sweep(self, store_cls: StoreClass, cutoff: int) -> int:
        removed = 0
        while True:
            ids = store_cls.expired_ids(self.db, cutoff, limit=self.batch_size)
            if not ids:
                break
            batch_removed = sum(
                1 for entity_id in ids if store_cls(self.db, entity_id).purge_expired(cutoff)
            )
            removed += batch_removed
            if batch_removed == 0:
                break
        return removed
