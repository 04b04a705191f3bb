"""Command to create a note under a freshly generated ID."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.core.tokens import generate_id
from app.schemas.note import NoteCreate, NoteStored
from app.services.note_store import NoteStore


class CreateNoteCommand:
    """Generate an unguessable ID and store the ciphertext under it."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.logger = logging.getLogger(__name__)

    def execute(self, data: NoteCreate) -> NoteStored:
        note_id = generate_id()
        result = NoteStore(self.db, note_id).store(
            data.ciphertext, ttl_seconds=data.ttl_seconds
        )
        self.logger.debug("Created note %s", note_id)
        return result
