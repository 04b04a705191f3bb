"""
Pydantic schemas for chat requests and responses.

Chat payloads use camelCase keys on the wire (``expiresAt``, ``hasMessage``);
``ttl_seconds`` keeps its snake_case name for compatibility with note bodies.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.constants.chat import ChatRole


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatCreate(BaseModel):
    """Body of ``POST /api/chat``; ``ciphertext`` becomes the initial message."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")
    ttl_seconds: Optional[int] = Field(default=None, ge=0)
    ciphertext: Optional[str] = None


class ChatMessageCreate(CamelModel):
    """Body of ``POST /api/chat/{id}/message``."""

    token: Optional[str] = None
    session_id: Optional[str] = None
    ciphertext: str = Field(..., min_length=1)


class ChatCreated(CamelModel):
    success: bool = True
    id: str
    creator_token: str
    recipient_token: str
    expires_at: int


class ChatStatus(CamelModel):
    """Role-scoped view of a chat returned to one party."""

    success: bool = True
    role: ChatRole
    expires_at: int
    has_message: bool
    is_my_message: bool
    message_read: bool
    ciphertext: Optional[str] = None
    message_at: Optional[int] = None


class MessageSent(CamelModel):
    success: bool = True
    message_at: int
