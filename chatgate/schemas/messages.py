"""Schemas used by messaging endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MessageSendRequest(BaseModel):
    # Length and blank checks happen in the service so they share one error shape.
    content: str = Field(..., description="Message body; trimmed before storing")


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    conversation_id: UUID
    sender_id: UUID
    content: str
    created_at: datetime


class MessagePageResponse(BaseModel):
    conversation_id: UUID
    messages: List[MessageResponse]
    next_before: datetime | None = Field(None, description="Cursor for the next (older) page, if any")


__all__ = ["MessageSendRequest", "MessageResponse", "MessagePageResponse"]
