"""SQLAlchemy engine, session factory and declarative base."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings

Base = declarative_base()


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine; SQLite URLs get thread-safe, single-connection pooling."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    settings = get_settings()
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        **kwargs,
    )


class DatabaseManager:
    """Lazily owns the engine and session factory for the configured database."""

    def __init__(self, database_url: Optional[str] = None) -> None:
        self._database_url = database_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            url = self._database_url or get_settings().database_url
            self._engine = build_engine(url)
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                autocommit=False, autoflush=False, bind=self.engine
            )
        return self._session_factory

    def configure(self, engine: Engine) -> None:
        """Point the manager at an existing engine (used by tests and workers)."""
        self._engine = engine
        self._session_factory = None

    def create_all(self) -> None:
        # Import models so they register with Base.metadata
        import app.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def db_session(self) -> Iterator[Session]:
        """
        Context manager for standalone DB operations (Celery tasks, commands).
        Commits on success, rolls back on error.
        """
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


db_manager = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency to provide a DB session to routes."""
    db = db_manager.session_factory()
    try:
        yield db
    finally:
        db.close()
