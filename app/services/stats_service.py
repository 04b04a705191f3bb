"""Daily creation counters and rolling-window aggregation."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Dict, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.daily_stat import DailyStat
from app.schemas.stats import (
    DailyStatRead,
    RecordResponse,
    StatsResponse,
    WindowCounts,
)

NOTE_COUNTER = "note_count"
CHAT_COUNTER = "chat_count"

# Window name -> number of days back from today (inclusive lower bound)
WINDOWS: Dict[str, int] = {
    "last_24h": 1,
    "last_7d": 7,
    "last_30d": 30,
    "last_365d": 365,
}
DAILY_HISTORY_DAYS = 30

_UPSERT_DIALECTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _fmt(day: date) -> str:
    return day.isoformat()


class StatsService:
    """Append-only counters for note and chat creation, one row per UTC day."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def record_note(self, day: Optional[date] = None) -> RecordResponse:
        self._increment(NOTE_COUNTER, day)
        return RecordResponse()

    def record_chat(self, day: Optional[date] = None) -> RecordResponse:
        self._increment(CHAT_COUNTER, day)
        return RecordResponse()

    def _increment(self, counter: str, day: Optional[date]) -> None:
        """Insert today's row with the counter at 1, or add 1 in the same statement."""
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise ValueError(f"Upsert not supported for dialect: {dialect}")

        values = {"date": _fmt(day or _utc_now().date()), NOTE_COUNTER: 0, CHAT_COUNTER: 0}
        values[counter] = 1
        column = getattr(DailyStat, counter)
        stmt = (
            insert(DailyStat)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[DailyStat.date],
                set_={counter: column + 1},
            )
        )
        try:
            self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def get_stats(self, now: Optional[datetime] = None) -> StatsResponse:
        """Rolling sums for each window plus per-day rows for the last 30 days."""
        now = (now or _utc_now()).astimezone(timezone.utc)
        today = now.date()

        notes: Dict[str, int] = {}
        chats: Dict[str, int] = {}
        for name, days in WINDOWS.items():
            notes[name], chats[name] = self._sum_since(today - timedelta(days=days))
        notes["all_time"], chats["all_time"] = self._sum_since(None)

        since = _fmt(today - timedelta(days=DAILY_HISTORY_DAYS))
        daily_rows = (
            self.db.query(DailyStat)
            .filter(DailyStat.date >= since)
            .order_by(DailyStat.date.asc())
            .all()
        )

        note_windows = WindowCounts(**notes)
        return StatsResponse(
            notes=note_windows,
            chats=WindowCounts(**chats),
            **note_windows.model_dump(),
            daily=[DailyStatRead.model_validate(row) for row in daily_rows],
            generated_at=now.isoformat(timespec="milliseconds").replace(
                "+00:00", "Z"
            ),
        )

    def _sum_since(self, since: Optional[date]) -> Tuple[int, int]:
        query = self.db.query(
            func.coalesce(func.sum(DailyStat.note_count), 0),
            func.coalesce(func.sum(DailyStat.chat_count), 0),
        )
        if since is not None:
            query = query.filter(DailyStat.date >= _fmt(since))
        note_total, chat_total = query.one()
        return int(note_total), int(chat_total)
