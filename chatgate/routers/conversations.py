"""Conversation, message and read-state API routes."""
from __future__ import annotations

from datetime import datetime
from typing import cast
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import Message, User
from ..schemas import (
    ConversationDetailResponse,
    ConversationListResponse,
    ConversationSummaryResponse,
    MessagePageResponse,
    MessageResponse,
    MessageSendRequest,
    ReadStateResponse,
    UnreadCountResponse,
    UserSummary,
)
from ..services import (
    get_current_user,
    list_conversation_summaries,
    list_messages,
    mark_read,
    open_conversation,
    resolve_page_size,
    send_message,
    unread_conversation_count,
    unread_count,
)

router = APIRouter(prefix="/chat", tags=["conversations"])


def _to_message_response(message: Message) -> MessageResponse:
    return MessageResponse.model_validate(message)


@router.get("/conversations", response_model=ConversationListResponse)
async def conversations_overview(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ConversationListResponse:
    summaries = list_conversation_summaries(db, user_id=cast(UUID, current_user.id))
    return ConversationListResponse(
        conversations=[
            ConversationSummaryResponse(
                id=summary.conversation.id,
                created_at=summary.conversation.created_at,
                other_user=UserSummary.model_validate(summary.other_user),
                last_message=_to_message_response(summary.last_message) if summary.last_message else None,
                unread_count=summary.unread_count,
            )
            for summary in summaries
        ]
    )


@router.get("/conversations/{conversation_id}", response_model=ConversationDetailResponse)
async def conversation_detail(
    conversation_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ConversationDetailResponse:
    viewer_id = cast(UUID, current_user.id)
    conversation = open_conversation(db, conversation_id=conversation_id, viewer_id=viewer_id)
    return ConversationDetailResponse(
        id=conversation.id,
        created_at=conversation.created_at,
        other_user=UserSummary.model_validate(conversation.other_participant(viewer_id)),
    )


@router.get("/conversations/{conversation_id}/messages", response_model=MessagePageResponse)
async def conversation_messages(
    conversation_id: UUID,
    before: datetime | None = Query(None, description="Only return messages older than this timestamp"),
    limit: int | None = Query(None, ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MessagePageResponse:
    messages = list_messages(
        db,
        conversation_id=conversation_id,
        viewer_id=cast(UUID, current_user.id),
        before=before,
        limit=limit,
    )
    page_full = len(messages) >= resolve_page_size(limit)
    return MessagePageResponse(
        conversation_id=conversation_id,
        messages=[_to_message_response(message) for message in messages],
        next_before=messages[0].created_at if messages and page_full else None,
    )


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message_endpoint(
    conversation_id: UUID,
    payload: MessageSendRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MessageResponse:
    record = send_message(
        db,
        conversation_id=conversation_id,
        sender_id=cast(UUID, current_user.id),
        content=payload.content,
    )
    return _to_message_response(record)


@router.post("/conversations/{conversation_id}/read", response_model=ReadStateResponse)
async def mark_conversation_read(
    conversation_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ReadStateResponse:
    user_id = cast(UUID, current_user.id)
    state = mark_read(db, conversation_id=conversation_id, user_id=user_id)
    return ReadStateResponse(
        conversation_id=conversation_id,
        last_read_at=state.last_read_at,
        unread_count=unread_count(db, conversation_id=conversation_id, user_id=user_id),
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_conversations(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> UnreadCountResponse:
    return UnreadCountResponse(count=unread_conversation_count(db, user_id=cast(UUID, current_user.id)))


__all__ = ["router"]
