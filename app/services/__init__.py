from app.services.chat_store import ChatStore
from app.services.note_store import NoteStore
from app.services.stats_service import StatsService

__all__ = [
    "ChatStore",
    "NoteStore",
    "StatsService",
]
