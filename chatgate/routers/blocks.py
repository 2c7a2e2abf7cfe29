"""Direct block / unblock API routes."""
from __future__ import annotations

from typing import cast
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import BlockActionResponse, BlockedListResponse, BlockedUserResponse, UserSummary
from ..services import block_user, get_current_user, list_blocked, unblock_user

router = APIRouter(prefix="/chat/blocks", tags=["blocks"])


@router.get("", response_model=BlockedListResponse)
async def blocked_users(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> BlockedListResponse:
    records = list_blocked(db, blocker_id=cast(UUID, current_user.id))
    return BlockedListResponse(
        blocked=[
            BlockedUserResponse(user=UserSummary.model_validate(record.blocked), created_at=record.created_at)
            for record in records
        ]
    )


@router.post("/{target_id}", response_model=BlockActionResponse, status_code=status.HTTP_201_CREATED)
async def block_user_endpoint(
    target_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> BlockActionResponse:
    changed = block_user(db, blocker_id=cast(UUID, current_user.id), blocked_id=target_id)
    return BlockActionResponse(user_id=target_id, status="blocked" if changed else "noop")


@router.delete("/{target_id}", response_model=BlockActionResponse)
async def unblock_user_endpoint(
    target_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> BlockActionResponse:
    changed = unblock_user(db, blocker_id=cast(UUID, current_user.id), blocked_id=target_id)
    return BlockActionResponse(user_id=target_id, status="unblocked" if changed else "noop")


__all__ = ["router"]
