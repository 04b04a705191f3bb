"""Chats API: create, poll, send, destroy."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from app.commands.create_chat_command import CreateChatCommand
from app.db import get_db
from app.routers.utils.responses import STORE_ERROR_RESPONSES
from app.schemas.chat import (
    ChatCreate,
    ChatCreated,
    ChatMessageCreate,
    ChatStatus,
    MessageSent,
)
from app.schemas.note import SuccessResponse
from app.services.chat_store import ChatStore
from app.tasks.stats_task import StatsEvent, dispatch_stats_event

chats_router = APIRouter(prefix="/api/chat", tags=["Chat"])


@chats_router.post("", response_model=ChatCreated)
def create_chat(
    data: ChatCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> ChatCreated:
    """Open a chat. The response carries both role tokens; they are not stored."""
    result = CreateChatCommand(db).execute(data)
    background_tasks.add_task(dispatch_stats_event, StatsEvent.CHAT_CREATED)
    return result


@chats_router.get(
    "/{chat_id}", response_model=ChatStatus, responses=STORE_ERROR_RESPONSES
)
def get_chat(
    chat_id: str,
    token: Optional[str] = Query(None),
    session_id: Optional[str] = Query(None, alias="sessionId"),
    db: Session = Depends(get_db),
) -> ChatStatus:
    """Role-scoped view of the chat for the token holder."""
    return ChatStore(db, chat_id).get(token, session_id)


@chats_router.post(
    "/{chat_id}/message",
    response_model=MessageSent,
    responses=STORE_ERROR_RESPONSES,
)
def send_message(
    chat_id: str,
    data: ChatMessageCreate,
    db: Session = Depends(get_db),
) -> MessageSent:
    """Replace the chat's message slot with the caller's ciphertext."""
    return ChatStore(db, chat_id).message(data.token, data.session_id, data.ciphertext)


@chats_router.delete(
    "/{chat_id}",
    response_model=SuccessResponse,
    response_model_exclude_none=True,
    responses=STORE_ERROR_RESPONSES,
)
def destroy_chat(
    chat_id: str,
    token: Optional[str] = Query(None),
    session_id: Optional[str] = Query(None, alias="sessionId"),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    """Destroy the chat for both parties."""
    return ChatStore(db, chat_id).destroy(token, session_id)
