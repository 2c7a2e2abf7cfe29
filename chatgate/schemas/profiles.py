"""Public profile fragments embedded in chat responses."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    display_name: str | None = None
    avatar_url: str | None = None


__all__ = ["UserSummary"]
