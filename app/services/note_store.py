"""NoteStore: store once, retrieve-and-destroy once, or expire."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.constants.chat import EntityKind
from app.core.entity_lock import entity_lock
from app.core.tokens import now_ms
from app.exceptions import NoteExpiredError, NoteNotFoundError
from app.infra.logging_config import get_logger
from app.models.note import Note
from app.schemas.note import NoteRetrieved, NoteStored, SuccessResponse

logger = get_logger("note_store")


class NoteStore:
    """
    Owns the lifecycle of the note addressed by ``note_id``.

    Every operation holds the entity lock for the note and reads its row with
    ``FOR UPDATE``, so retrieval and deletion are one step: a note can never be
    returned twice.
    """

    def __init__(
        self, db: Session, note_id: str, settings: Optional[Settings] = None
    ) -> None:
        self.db = db
        self.note_id = note_id
        self.settings = settings or get_settings()

    @classmethod
    def expired_ids(cls, db: Session, now: int, limit: int = 500) -> List[str]:
        """IDs of notes past expiry, oldest first."""
        rows = (
            db.query(Note.id)
            .filter(Note.expires_at < now)
            .order_by(Note.expires_at)
            .limit(limit)
            .all()
        )
        return [row.id for row in rows]

    def store(self, ciphertext: str, ttl_seconds: Optional[int] = None) -> NoteStored:
        """Insert the note. A duplicate ID fails with the storage error."""
        with entity_lock(EntityKind.NOTE, self.note_id):
            now = now_ms()
            note = Note(
                id=self.note_id,
                ciphertext=ciphertext,
                created_at=now,
                expires_at=now + self._ttl_ms(ttl_seconds),
            )
            try:
                self._delete_if_expired(now)
                self.db.add(note)
                self.db.commit()
            except SQLAlchemyError:
                self.db.rollback()
                raise
            logger.info("Note %s stored, expires_at=%d", self.note_id, note.expires_at)
            return NoteStored(id=self.note_id)

    def retrieve(self) -> NoteRetrieved:
        """Return the ciphertext and destroy the note.

        Raises:
            NoteNotFoundError: the note never existed or was already read.
            NoteExpiredError: the note was past expiry; it is deleted.
        """
        with entity_lock(EntityKind.NOTE, self.note_id):
            now = now_ms()
            note = self._locked_row()
            if note is None:
                self.db.rollback()
                raise NoteNotFoundError()

            expired = note.is_expired(now)
            ciphertext = note.ciphertext
            try:
                self.db.delete(note)
                self.db.commit()
            except SQLAlchemyError:
                self.db.rollback()
                raise

            if expired:
                logger.info("Note %s expired before it was read", self.note_id)
                raise NoteExpiredError()
            logger.info("Note %s read and destroyed", self.note_id)
            return NoteRetrieved(ciphertext=ciphertext)

    def cleanup_all(self, now: Optional[int] = None) -> SuccessResponse:
        """Delete the note if it is past expiry. Safe to call repeatedly."""
        self.purge_expired(now)
        return SuccessResponse()

    def purge_expired(self, now: Optional[int] = None) -> bool:
        with entity_lock(EntityKind.NOTE, self.note_id):
            try:
                deleted = self._delete_if_expired(now if now is not None else now_ms())
                self.db.commit()
            except SQLAlchemyError:
                self.db.rollback()
                raise
            if deleted:
                logger.debug("Note %s swept", self.note_id)
            return deleted

    def _locked_row(self) -> Optional[Note]:
        return (
            self.db.query(Note)
            .filter(Note.id == self.note_id)
            .with_for_update()
            .first()
        )

    def _delete_if_expired(self, now: int) -> bool:
        deleted = (
            self.db.query(Note)
            .filter(Note.id == self.note_id, Note.expires_at < now)
            .delete(synchronize_session=False)
        )
        return deleted > 0

    def _ttl_ms(self, ttl_seconds: Optional[int]) -> int:
        max_seconds = self.settings.note_max_retention_seconds
        if not ttl_seconds:
            return max_seconds * 1000
        return min(ttl_seconds, max_seconds) * 1000
