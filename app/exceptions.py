"""
Expected store outcomes.

Stores raise these for not-found, expired, unauthorized, forbidden and
malformed-input cases; the API renders them as ``{"success": false,
"error": message}`` with ``status_code``. Anything else is a storage fault.
"""

from __future__ import annotations

from app.constants.chat import (
    CHAT_EXPIRED,
    CHAT_NOT_FOUND,
    INVALID_TOKEN,
    NOTE_EXPIRED,
    NOTE_NOT_FOUND,
    SESSION_MISMATCH,
)


class StoreError(Exception):
    """Base class for locally recoverable store failures."""

    status_code: int = 400
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_payload(self) -> dict:
        return {"success": False, "error": self.message}


class NotFoundError(StoreError):
    # Not-found keeps a 200 status; clients branch on ``success``.
    status_code = 200
    default_message = "Not found"


class NoteNotFoundError(NotFoundError):
    default_message = NOTE_NOT_FOUND


class ChatNotFoundError(NotFoundError):
    default_message = CHAT_NOT_FOUND


class ExpiredError(NotFoundError):
    default_message = "Expired"


class NoteExpiredError(ExpiredError):
    default_message = NOTE_EXPIRED


class ChatExpiredError(ExpiredError):
    default_message = CHAT_EXPIRED


class InvalidTokenError(StoreError):
    status_code = 401
    default_message = INVALID_TOKEN


class SessionMismatchError(StoreError):
    status_code = 403
    default_message = SESSION_MISMATCH


class MalformedInputError(StoreError):
    status_code = 401
    default_message = "Malformed request"
