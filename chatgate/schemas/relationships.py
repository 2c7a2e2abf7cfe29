"""Schemas for relationship checks and chat requests."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..constants import ChatRequestAction, RelationshipStatus
from ..models import ChatRequestStatus
from .profiles import UserSummary


class RelationshipResponse(BaseModel):
    user_id: UUID
    status: RelationshipStatus
    request_id: UUID | None = None
    conversation_id: UUID | None = None


class ChatRequestCreate(BaseModel):
    receiver_id: UUID | None = Field(None, description="Target user id")
    receiver_username: str | None = Field(None, max_length=150, description="Target username when the id is unknown")


class ChatRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sender_id: UUID
    receiver_id: UUID
    status: ChatRequestStatus
    created_at: datetime
    responded_at: datetime | None = None


class IncomingChatRequest(ChatRequestResponse):
    sender: UserSummary


class SentChatRequest(ChatRequestResponse):
    receiver: UserSummary


class ChatRequestsOverviewResponse(BaseModel):
    incoming: list[IncomingChatRequest]
    sent: list[SentChatRequest]


class ChatRequestRespondPayload(BaseModel):
    action: ChatRequestAction


class ChatRequestRespondResponse(BaseModel):
    action: ChatRequestAction
    request: ChatRequestResponse
    conversation_id: UUID | None = None


__all__ = [
    "RelationshipResponse",
    "ChatRequestCreate",
    "ChatRequestResponse",
    "IncomingChatRequest",
    "SentChatRequest",
    "ChatRequestsOverviewResponse",
    "ChatRequestRespondPayload",
    "ChatRequestRespondResponse",
]
