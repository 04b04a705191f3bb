from app.models.chat import Chat
from app.models.daily_stat import DailyStat
from app.models.note import Note

__all__ = [
    "Chat",
    "DailyStat",
    "Note",
]
