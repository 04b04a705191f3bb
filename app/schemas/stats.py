"""Schemas for aggregated creation statistics."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel


class WindowCounts(BaseModel):
    last_24h: int = 0
    last_7d: int = 0
    last_30d: int = 0
    last_365d: int = 0
    all_time: int = 0


class DailyStatRead(BaseModel):
    date: str
    note_count: int
    chat_count: int

    model_config = {"from_attributes": True}


class StatsResponse(BaseModel):
    """Rolling windows for notes and chats plus the last 30 daily rows.

    The top-level ``last_*``/``all_time`` fields mirror ``notes`` for clients
    that predate chat counters.
    """

    notes: WindowCounts
    chats: WindowCounts
    last_24h: int
    last_7d: int
    last_30d: int
    last_365d: int
    all_time: int
    daily: List[DailyStatRead]
    generated_at: str


class RecordResponse(BaseModel):
    success: bool = True
