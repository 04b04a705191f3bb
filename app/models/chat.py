"""Chat model: a two-party session with a single mutable message slot."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, Boolean, Column, String, Text

from app.constants.chat import ChatRole
from app.db import Base


class Chat(Base):
    """
    One row per chat. Only digests of the role tokens and bound sessions are
    stored. Sending overwrites ``current_message`` and resets ``message_read``.
    """

    __tablename__ = "chats"

    id = Column(String(64), primary_key=True)
    creator_token_hash = Column(String(64), nullable=False)
    recipient_token_hash = Column(String(64), nullable=False)
    creator_session_hash = Column(String(64), nullable=True)
    recipient_session_hash = Column(String(64), nullable=True)
    created_at = Column(BigInteger, nullable=False)  # epoch ms
    expires_at = Column(BigInteger, nullable=False, index=True)  # epoch ms
    current_message = Column(Text, nullable=True)
    current_sender = Column(String(16), nullable=True)  # 'creator' | 'recipient'
    message_at = Column(BigInteger, nullable=True)
    message_read = Column(Boolean, nullable=False, default=False)

    def is_expired(self, now: int) -> bool:
        return now > self.expires_at

    def session_hash_for(self, role: ChatRole) -> Optional[str]:
        if role == ChatRole.CREATOR:
            return self.creator_session_hash
        return self.recipient_session_hash

    def bind_session(self, role: ChatRole, session_hash: str) -> None:
        if role == ChatRole.CREATOR:
            self.creator_session_hash = session_hash
        else:
            self.recipient_session_hash = session_hash
