"""Tests for SweepExpiredCommand."""

from app.commands.sweep_expired_command import SweepExpiredCommand
from app.models.chat import Chat
from app.models.note import Note
from app.services.note_store import NoteStore


def test_sweep_removes_only_expired_entities(db, clock, chat_factory):
    NoteStore(db, "old").store("a", ttl_seconds=10)
    NoteStore(db, "fresh").store("b", ttl_seconds=3600)
    old_chat = chat_factory(ttl_seconds=10)
    fresh_chat = chat_factory(ttl_seconds=3600)
    clock.advance(11)

    result = SweepExpiredCommand(db).execute()

    assert result.success is True
    assert (result.notes, result.chats) == (1, 1)
    assert [n.id for n in db.query(Note).all()] == ["fresh"]
    remaining = [c.id for c in db.query(Chat).all()]
    assert old_chat.id not in remaining
    assert fresh_chat.id in remaining


def test_sweep_pages_through_batches(db, clock):
    for i in range(7):
        NoteStore(db, f"n{i}").store("x", ttl_seconds=1)
    clock.advance(2)

    result = SweepExpiredCommand(db, batch_size=3).execute()

    assert result.notes == 7
    assert db.query(Note).count() == 0


def test_sweep_with_nothing_expired(db, clock, setup_note, setup_chat):
    result = SweepExpiredCommand(db).execute()
    assert (result.notes, result.chats) == (0, 0)


def test_sweep_uses_explicit_cutoff(db, clock):
    NoteStore(db, "n1").store("x", ttl_seconds=60)
    result = SweepExpiredCommand(db).execute(now=clock.now + 61_000)
    assert result.notes == 1
