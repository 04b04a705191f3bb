"""ChatStore: two-party ephemeral chat with a single overwritable message slot."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.constants.chat import (
    CHAT_ALREADY_DESTROYED,
    CHAT_DESTROYED,
    CHAT_NOT_FOUND,
    SESSION_MISMATCH,
    SESSION_MISMATCH_SHORT,
    SESSION_REQUIRED,
    TOKEN_REQUIRED,
    ChatRole,
    EntityKind,
)
from app.core.entity_lock import entity_lock
from app.core.tokens import digests_match, hash_token, now_ms
from app.exceptions import (
    ChatExpiredError,
    ChatNotFoundError,
    InvalidTokenError,
    MalformedInputError,
    SessionMismatchError,
)
from app.infra.logging_config import get_logger
from app.models.chat import Chat
from app.schemas.chat import ChatCreated, ChatStatus, MessageSent
from app.schemas.note import SuccessResponse

logger = get_logger("chat_store")


def _require_token(token: Optional[str]) -> None:
    if not token:
        raise MalformedInputError(TOKEN_REQUIRED)


def _require_session(session_id: Optional[str]) -> None:
    if not session_id:
        raise MalformedInputError(SESSION_REQUIRED)


class ChatStore:
    """
    Owns the lifecycle of the chat addressed by ``chat_id``.

    Token and session checks run on every access. A role's session digest is
    bound by the first session that reads or writes with that role's token
    and is immutable afterwards; any other session presenting the same token
    is rejected.
    """

    def __init__(
        self, db: Session, chat_id: str, settings: Optional[Settings] = None
    ) -> None:
        self.db = db
        self.chat_id = chat_id
        self.settings = settings or get_settings()

    @classmethod
    def expired_ids(cls, db: Session, now: int, limit: int = 500) -> List[str]:
        """IDs of chats past expiry, oldest first."""
        rows = (
            db.query(Chat.id)
            .filter(Chat.expires_at < now)
            .order_by(Chat.expires_at)
            .limit(limit)
            .all()
        )
        return [row.id for row in rows]

    def create(
        self,
        creator_token: str,
        recipient_token: str,
        creator_session_id: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
        initial_message: Optional[str] = None,
    ) -> ChatCreated:
        """Insert the chat, optionally binding the creator session and seeding a message."""
        _require_token(creator_token)
        _require_token(recipient_token)
        with entity_lock(EntityKind.CHAT, self.chat_id):
            now = now_ms()
            chat = Chat(
                id=self.chat_id,
                creator_token_hash=hash_token(creator_token),
                recipient_token_hash=hash_token(recipient_token),
                creator_session_hash=hash_token(creator_session_id),
                recipient_session_hash=None,
                created_at=now,
                expires_at=now + self._ttl_ms(ttl_seconds),
                current_message=initial_message or None,
                current_sender=ChatRole.CREATOR.value if initial_message else None,
                message_at=now if initial_message else None,
                message_read=False,
            )
            try:
                self._delete_if_expired(now)
                self.db.add(chat)
                self.db.commit()
            except SQLAlchemyError:
                self.db.rollback()
                raise
            logger.info(
                "Chat %s created, expires_at=%d, seeded=%s",
                self.chat_id,
                chat.expires_at,
                bool(initial_message),
            )
            return ChatCreated(
                id=self.chat_id,
                creator_token=creator_token,
                recipient_token=recipient_token,
                expires_at=chat.expires_at,
            )

    def get(self, token: Optional[str], session_id: Optional[str]) -> ChatStatus:
        """
        Return the caller's role-scoped view of the chat.

        Reading a message authored by the other party marks it read. The
        returned ``message_read`` is the state before this call.
        """
        _require_token(token)
        _require_session(session_id)
        with entity_lock(EntityKind.CHAT, self.chat_id):
            now = now_ms()
            chat = self._load(now)
            try:
                role = self._authorize(chat, token, session_id)
                has_message = chat.current_message is not None
                is_my_message = chat.current_sender == role.value
                was_read = bool(chat.message_read)
                if has_message and not is_my_message and not was_read:
                    chat.message_read = True
                status = ChatStatus(
                    role=role,
                    expires_at=chat.expires_at,
                    has_message=has_message,
                    is_my_message=is_my_message,
                    message_read=was_read,
                    ciphertext=chat.current_message if has_message else None,
                    message_at=chat.message_at,
                )
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
            return status

    def message(
        self, token: Optional[str], session_id: Optional[str], ciphertext: str
    ) -> MessageSent:
        """Overwrite the message slot with the caller's ciphertext."""
        _require_token(token)
        _require_session(session_id)
        with entity_lock(EntityKind.CHAT, self.chat_id):
            now = now_ms()
            chat = self._load(now)
            try:
                role = self._authorize(
                    chat, token, session_id, mismatch_message=SESSION_MISMATCH_SHORT
                )
                chat.current_message = ciphertext
                chat.current_sender = role.value
                chat.message_at = now
                chat.message_read = False
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
            logger.debug("Chat %s message set by %s", self.chat_id, role.value)
            return MessageSent(message_at=now)

    def destroy(
        self, token: Optional[str], session_id: Optional[str] = None
    ) -> SuccessResponse:
        """Delete the chat. Either party may destroy it.

        When a session ID is presented and the caller's role is already bound,
        the session must match. Destroy never binds a session.
        """
        _require_token(token)
        with entity_lock(EntityKind.CHAT, self.chat_id):
            now = now_ms()
            chat = self._load(now, not_found_message=CHAT_ALREADY_DESTROYED)
            try:
                role = self._resolve_role(chat, hash_token(token))
                session_hash = hash_token(session_id)
                if session_hash is not None:
                    self._check_session(
                        chat,
                        role,
                        session_hash,
                        bind=False,
                        mismatch_message=SESSION_MISMATCH_SHORT,
                    )
                self.db.delete(chat)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
            logger.info("Chat %s destroyed by %s", self.chat_id, role.value)
            return SuccessResponse(message=CHAT_DESTROYED)

    def cleanup_all(self, now: Optional[int] = None) -> SuccessResponse:
        """Delete the chat if it is past expiry. Safe to call repeatedly."""
        self.purge_expired(now)
        return SuccessResponse()

    def purge_expired(self, now: Optional[int] = None) -> bool:
        with entity_lock(EntityKind.CHAT, self.chat_id):
            try:
                deleted = self._delete_if_expired(now if now is not None else now_ms())
                self.db.commit()
            except SQLAlchemyError:
                self.db.rollback()
                raise
            if deleted:
                logger.debug("Chat %s swept", self.chat_id)
            return deleted

    def _load(self, now: int, not_found_message: str = CHAT_NOT_FOUND) -> Chat:
        """Lock the chat row; an expired row is deleted and reported as expired."""
        chat = (
            self.db.query(Chat)
            .filter(Chat.id == self.chat_id)
            .with_for_update()
            .first()
        )
        if chat is None:
            self.db.rollback()
            raise ChatNotFoundError(not_found_message)
        if chat.is_expired(now):
            try:
                self.db.delete(chat)
                self.db.commit()
            except SQLAlchemyError:
                self.db.rollback()
                raise
            logger.info("Chat %s expired on access", self.chat_id)
            raise ChatExpiredError()
        return chat

    def _authorize(
        self,
        chat: Chat,
        token: Optional[str],
        session_id: Optional[str],
        mismatch_message: str = SESSION_MISMATCH,
    ) -> ChatRole:
        role = self._resolve_role(chat, hash_token(token))
        self._check_session(
            chat,
            role,
            hash_token(session_id),
            bind=True,
            mismatch_message=mismatch_message,
        )
        return role

    @staticmethod
    def _resolve_role(chat: Chat, token_hash: Optional[str]) -> ChatRole:
        if digests_match(chat.creator_token_hash, token_hash):
            return ChatRole.CREATOR
        if digests_match(chat.recipient_token_hash, token_hash):
            return ChatRole.RECIPIENT
        raise InvalidTokenError()

    def _check_session(
        self,
        chat: Chat,
        role: ChatRole,
        session_hash: Optional[str],
        bind: bool,
        mismatch_message: str = SESSION_MISMATCH,
    ) -> None:
        bound = chat.session_hash_for(role)
        if bound is not None:
            if not digests_match(bound, session_hash):
                logger.warning(
                    "Chat %s rejected %s access from an unbound session",
                    self.chat_id,
                    role.value,
                )
                raise SessionMismatchError(mismatch_message)
            return
        if bind and session_hash is not None:
            chat.bind_session(role, session_hash)
            logger.debug("Chat %s bound %s session", self.chat_id, role.value)

    def _delete_if_expired(self, now: int) -> bool:
        deleted = (
            self.db.query(Chat)
            .filter(Chat.id == self.chat_id, Chat.expires_at < now)
            .delete(synchronize_session=False)
        )
        return deleted > 0

    def _ttl_ms(self, ttl_seconds: Optional[int]) -> int:
        if not ttl_seconds:
            return self.settings.chat_default_ttl_seconds * 1000
        return ttl_seconds * 1000
