"""Fixtures for chats."""

from dataclasses import dataclass
from typing import Optional

import pytest

from app.core.tokens import generate_id, generate_token
from app.services.chat_store import ChatStore


@dataclass
class SeededChat:
    id: str
    creator_token: str
    recipient_token: str
    creator_session: Optional[str]
    recipient_session: str
    expires_at: int

    def store(self, db) -> ChatStore:
        return ChatStore(db, self.id)


@pytest.fixture(scope="function")
def chat_factory(db, faker, clock):
    """Create chats with fresh tokens; keyword args go to ChatStore.create."""

    def _create(
        creator_session: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
        initial_message: Optional[str] = None,
    ) -> SeededChat:
        chat_id = generate_id()
        creator_token = generate_token()
        recipient_token = generate_token()
        created = ChatStore(db, chat_id).create(
            creator_token,
            recipient_token,
            creator_session_id=creator_session,
            ttl_seconds=ttl_seconds,
            initial_message=initial_message,
        )
        return SeededChat(
            id=chat_id,
            creator_token=creator_token,
            recipient_token=recipient_token,
            creator_session=creator_session,
            recipient_session=faker.uuid4(),
            expires_at=created.expires_at,
        )

    return _create


@pytest.fixture(scope="function")
def setup_chat(chat_factory, faker):
    """A one-hour chat whose creator session is bound at creation."""
    return chat_factory(creator_session=faker.uuid4(), ttl_seconds=3600)
