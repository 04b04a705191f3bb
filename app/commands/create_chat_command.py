"""Command to open a chat: new ID, one bearer token per role."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.core.tokens import generate_id, generate_token
from app.schemas.chat import ChatCreate, ChatCreated
from app.services.chat_store import ChatStore


class CreateChatCommand:
    """
    Generate the chat ID and both role tokens, then create the chat.

    The raw tokens are returned to the creator exactly once; only their
    digests are persisted.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.logger = logging.getLogger(__name__)

    def execute(self, data: ChatCreate) -> ChatCreated:
        chat_id = generate_id()
        creator_token = generate_token()
        recipient_token = generate_token()
        while recipient_token == creator_token:
            recipient_token = generate_token()

        result = ChatStore(self.db, chat_id).create(
            creator_token,
            recipient_token,
            creator_session_id=data.session_id,
            ttl_seconds=data.ttl_seconds,
            initial_message=data.ciphertext,
        )
        self.logger.debug("Created chat %s", chat_id)
        return result
