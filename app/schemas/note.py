"""Pydantic schemas for note requests and responses."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class NoteCreate(BaseModel):
    """Body of ``POST /api/note``. Ciphertext is opaque to the server."""

    ciphertext: str = Field(..., min_length=1)
    ttl_seconds: Optional[int] = Field(default=None, ge=0)


class NoteStored(BaseModel):
    id: str


class NoteRetrieved(BaseModel):
    success: bool = True
    ciphertext: str


class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
