import os

os.environ.setdefault("ENV", "test")

from types import SimpleNamespace  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

import app.models  # noqa: E402,F401
from app.db import Base, build_engine, db_manager, get_db  # noqa: E402
from app.main import create_app  # noqa: E402
from app.tasks import stats_task  # noqa: E402

pytest_plugins = [
    "tests.fixtures.clock_fixtures",
    "tests.fixtures.note_fixtures",
    "tests.fixtures.chat_fixtures",
]


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    db_manager.configure(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def threaded_sessions(tmp_path):
    """Session factory on a file-backed SQLite database, one connection per thread."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'ephemera.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine):
    session = db_manager.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def stats_tasks(monkeypatch):
    """Replace the Celery stats tasks so nothing talks to a broker."""
    tasks = SimpleNamespace(
        note=SimpleNamespace(delay=MagicMock(name="record_note_task.delay")),
        chat=SimpleNamespace(delay=MagicMock(name="record_chat_task.delay")),
    )
    monkeypatch.setitem(
        stats_task._EVENT_TASKS, stats_task.StatsEvent.NOTE_CREATED, tasks.note
    )
    monkeypatch.setitem(
        stats_task._EVENT_TASKS, stats_task.StatsEvent.CHAT_CREATED, tasks.chat
    )
    return tasks


@pytest.fixture
def client(db):
    """Client with db override and testing mode."""
    app = create_app(testing=True)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
