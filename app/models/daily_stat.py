"""DailyStat model: creation counters bucketed by UTC calendar day."""

from __future__ import annotations

from sqlalchemy import Column, Integer, String

from app.db import Base


class DailyStat(Base):
    __tablename__ = "daily_stats"

    date = Column(String(10), primary_key=True)  # YYYY-MM-DD, UTC
    note_count = Column(Integer, nullable=False, default=0, server_default="0")
    chat_count = Column(Integer, nullable=False, default=0, server_default="0")
