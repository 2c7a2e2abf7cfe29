"""Relationship check and chat request API routes."""
from __future__ import annotations

from typing import cast
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..constants import RequestScope
from ..database import get_session
from ..models import User
from ..schemas import (
    ChatRequestCreate,
    ChatRequestRespondPayload,
    ChatRequestRespondResponse,
    ChatRequestResponse,
    ChatRequestsOverviewResponse,
    IncomingChatRequest,
    RelationshipResponse,
    SentChatRequest,
)
from ..services import (
    create_chat_request,
    get_current_user,
    list_chat_requests,
    resolve_relationship,
    resolve_user_ref,
    respond_to_request,
)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/check", response_model=RelationshipResponse)
async def check_relationship(
    user_id: UUID | None = Query(None),
    username: str | None = Query(None, max_length=150),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> RelationshipResponse:
    target = resolve_user_ref(db, user_id=user_id, username=username)
    target_id = cast(UUID, target.id)
    relationship = resolve_relationship(db, viewer_id=cast(UUID, current_user.id), target_id=target_id)
    return RelationshipResponse(
        user_id=target_id,
        status=relationship.status,
        request_id=relationship.request_id,
        conversation_id=relationship.conversation_id,
    )


@router.get("/requests", response_model=ChatRequestsOverviewResponse)
async def chat_requests_overview(
    scope: RequestScope = Query(RequestScope.ALL),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ChatRequestsOverviewResponse:
    incoming, sent = list_chat_requests(db, user_id=cast(UUID, current_user.id), scope=scope)
    return ChatRequestsOverviewResponse(
        incoming=[IncomingChatRequest.model_validate(item) for item in incoming],
        sent=[SentChatRequest.model_validate(item) for item in sent],
    )


@router.post("/requests", response_model=ChatRequestResponse, status_code=status.HTTP_201_CREATED)
async def send_chat_request_endpoint(
    payload: ChatRequestCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ChatRequestResponse:
    request = create_chat_request(
        db,
        sender_id=cast(UUID, current_user.id),
        receiver_id=payload.receiver_id,
        receiver_username=payload.receiver_username,
    )
    return ChatRequestResponse.model_validate(request)


@router.post("/requests/{request_id}/respond", response_model=ChatRequestRespondResponse)
async def respond_to_chat_request(
    request_id: UUID,
    payload: ChatRequestRespondPayload,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ChatRequestRespondResponse:
    outcome = respond_to_request(
        db,
        request_id=request_id,
        responder_id=cast(UUID, current_user.id),
        action=payload.action,
    )
    return ChatRequestRespondResponse(
        action=outcome.action,
        request=ChatRequestResponse.model_validate(outcome.request),
        conversation_id=outcome.conversation.id if outcome.conversation is not None else None,
    )


__all__ = ["router"]
