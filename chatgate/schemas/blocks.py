"""Schemas for the block list endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel

from .profiles import UserSummary


class BlockActionResponse(BaseModel):
    user_id: UUID
    status: Literal["blocked", "unblocked", "noop"]


class BlockedUserResponse(BaseModel):
    user: UserSummary
    created_at: datetime


class BlockedListResponse(BaseModel):
    blocked: list[BlockedUserResponse]


__all__ = ["BlockActionResponse", "BlockedUserResponse", "BlockedListResponse"]
