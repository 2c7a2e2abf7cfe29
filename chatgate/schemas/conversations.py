"""Schemas for the conversation list, detail and read-state endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel

from .messages import MessageResponse
from .profiles import UserSummary


class ConversationSummaryResponse(BaseModel):
    id: UUID
    created_at: datetime
    other_user: UserSummary
    last_message: MessageResponse | None = None
    unread_count: int = 0


class ConversationListResponse(BaseModel):
    conversations: List[ConversationSummaryResponse]


class ConversationDetailResponse(BaseModel):
    id: UUID
    created_at: datetime
    other_user: UserSummary


class ReadStateResponse(BaseModel):
    conversation_id: UUID
    last_read_at: datetime
    unread_count: int


class UnreadCountResponse(BaseModel):
    count: int


__all__ = [
    "ConversationSummaryResponse",
    "ConversationListResponse",
    "ConversationDetailResponse",
    "ReadStateResponse",
    "UnreadCountResponse",
]
