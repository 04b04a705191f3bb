"""Chat roles and user-facing store messages."""

from enum import StrEnum


class ChatRole(StrEnum):
    """The two parties of a chat."""

    CREATOR = "creator"
    RECIPIENT = "recipient"


class EntityKind(StrEnum):
    """Lock namespaces; a note and a chat may share an ID string."""

    NOTE = "note"
    CHAT = "chat"


NOTE_NOT_FOUND = "Note not found or already read"
NOTE_EXPIRED = "Note has expired"

CHAT_NOT_FOUND = "Chat not found or expired"
CHAT_ALREADY_DESTROYED = "Chat not found or already destroyed"
CHAT_EXPIRED = "Chat has expired"
CHAT_DESTROYED = "Chat destroyed"

INVALID_TOKEN = "Invalid token"
SESSION_MISMATCH = "Session mismatch - this chat is bound to another browser"
SESSION_MISMATCH_SHORT = "Session mismatch"
TOKEN_REQUIRED = "Token required"
SESSION_REQUIRED = "Session ID required"
