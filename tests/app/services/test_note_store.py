"""Tests for NoteStore."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.constants.chat import NOTE_EXPIRED, NOTE_NOT_FOUND
from app.exceptions import NoteExpiredError, NoteNotFoundError
from app.models.note import Note
from app.services.note_store import NoteStore

DAY_MS = 24 * 60 * 60 * 1000


def _row(db, note_id):
    return db.query(Note).filter(Note.id == note_id).first()


def test_store_uses_max_retention_by_default(db, clock):
    result = NoteStore(db, "n1").store("cipher")
    assert result.id == "n1"
    note = _row(db, "n1")
    assert note.ciphertext == "cipher"
    assert note.created_at == clock.now
    assert note.expires_at == clock.now + 7 * DAY_MS


def test_store_with_ttl(db, clock):
    NoteStore(db, "n1").store("cipher", ttl_seconds=60)
    assert _row(db, "n1").expires_at == clock.now + 60_000


def test_store_ttl_is_capped_at_max_retention(db, clock):
    NoteStore(db, "n1").store("cipher", ttl_seconds=30 * 24 * 60 * 60)
    assert _row(db, "n1").expires_at == clock.now + 7 * DAY_MS


def test_store_duplicate_id_raises_storage_error(db, setup_note):
    with pytest.raises(SQLAlchemyError):
        NoteStore(db, setup_note.id).store("other")
    # The original note is untouched
    assert NoteStore(db, setup_note.id).retrieve().ciphertext == setup_note.ciphertext


def test_retrieve_returns_ciphertext_and_destroys(db, setup_note):
    result = NoteStore(db, setup_note.id).retrieve()
    assert result.success is True
    assert result.ciphertext == setup_note.ciphertext
    assert _row(db, setup_note.id) is None


def test_retrieve_twice_is_not_found(db, setup_note):
    store = NoteStore(db, setup_note.id)
    store.retrieve()
    with pytest.raises(NoteNotFoundError) as exc_info:
        store.retrieve()
    assert exc_info.value.message == NOTE_NOT_FOUND
    with pytest.raises(NoteNotFoundError):
        NoteStore(db, setup_note.id).retrieve()


def test_retrieve_unknown_note(db, clock):
    with pytest.raises(NoteNotFoundError):
        NoteStore(db, "missing").retrieve()


def test_retrieve_after_expiry_reports_expired_then_not_found(db, clock):
    store = NoteStore(db, "short")
    store.store("cipher", ttl_seconds=1)
    clock.advance(1.5)

    with pytest.raises(NoteExpiredError) as exc_info:
        store.retrieve()
    assert exc_info.value.message == NOTE_EXPIRED
    assert exc_info.value.to_payload() == {"success": False, "error": "Note has expired"}
    assert _row(db, "short") is None

    with pytest.raises(NoteNotFoundError):
        store.retrieve()


def test_retrieve_at_exact_expiry_still_succeeds(db, clock):
    store = NoteStore(db, "edge")
    store.store("cipher", ttl_seconds=1)
    clock.advance(1)
    assert store.retrieve().ciphertext == "cipher"


def test_cleanup_all_keeps_live_note(db, setup_note):
    result = NoteStore(db, setup_note.id).cleanup_all()
    assert result.success is True
    assert _row(db, setup_note.id) is not None


def test_cleanup_all_removes_expired_note_and_is_idempotent(db, clock):
    store = NoteStore(db, "n1")
    store.store("cipher", ttl_seconds=10)
    clock.advance(11)
    assert store.cleanup_all().success is True
    assert _row(db, "n1") is None
    assert store.cleanup_all().success is True


def test_purge_expired_reports_whether_it_deleted(db, clock):
    store = NoteStore(db, "n1")
    store.store("cipher", ttl_seconds=10)
    assert store.purge_expired() is False
    clock.advance(11)
    assert store.purge_expired() is True
    assert store.purge_expired() is False


def test_expired_ids_lists_only_expired(db, clock):
    NoteStore(db, "soon").store("a", ttl_seconds=5)
    NoteStore(db, "later").store("b", ttl_seconds=500)
    clock.advance(10)
    assert NoteStore.expired_ids(db, clock.now) == ["soon"]


def test_concurrent_retrieve_returns_note_once(threaded_sessions, clock):
    setup = threaded_sessions()
    NoteStore(setup, "n1").store("cipher")
    setup.close()

    readers = 8
    start = threading.Barrier(readers)

    def read_once():
        session = threaded_sessions()
        try:
            start.wait()
            return NoteStore(session, "n1").retrieve().ciphertext
        except NoteNotFoundError:
            return None
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=readers) as pool:
        results = list(pool.map(lambda _: read_once(), range(readers)))

    assert results.count("cipher") == 1
    assert results.count(None) == readers - 1

    check = threaded_sessions()
    assert _row(check, "n1") is None
    check.close()
