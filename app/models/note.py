"""Note model: one opaque ciphertext that may be read exactly once."""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, String, Text

from app.db import Base


class Note(Base):
    """A single secret payload. Deleted on first retrieval or on expiry."""

    __tablename__ = "notes"

    id = Column(String(64), primary_key=True)
    ciphertext = Column(Text, nullable=False)
    created_at = Column(BigInteger, nullable=False)  # epoch ms
    expires_at = Column(BigInteger, nullable=False, index=True)  # epoch ms

    def is_expired(self, now: int) -> bool:
        return now > self.expires_at
