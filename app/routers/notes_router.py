"""Notes API: create a note, read it once."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from app.commands.create_note_command import CreateNoteCommand
from app.db import get_db
from app.routers.utils.responses import STORE_ERROR_RESPONSES
from app.schemas.note import NoteCreate, NoteRetrieved, NoteStored
from app.services.note_store import NoteStore
from app.tasks.stats_task import StatsEvent, dispatch_stats_event

notes_router = APIRouter(prefix="/api/note", tags=["Note"])


@notes_router.post("", response_model=NoteStored)
def create_note(
    data: NoteCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> NoteStored:
    """Store ciphertext under a new note ID."""
    result = CreateNoteCommand(db).execute(data)
    background_tasks.add_task(dispatch_stats_event, StatsEvent.NOTE_CREATED)
    return result


@notes_router.get(
    "/{note_id}", response_model=NoteRetrieved, responses=STORE_ERROR_RESPONSES
)
def retrieve_note(
    note_id: str,
    db: Session = Depends(get_db),
) -> NoteRetrieved:
    """Return the note's ciphertext and destroy it."""
    return NoteStore(db, note_id).retrieve()
