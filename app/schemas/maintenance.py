"""Schemas for maintenance operations."""

from pydantic import BaseModel


class SweepResult(BaseModel):
    """Number of expired notes and chats removed by one sweep."""

    success: bool = True
    notes: int = 0
    chats: int = 0
