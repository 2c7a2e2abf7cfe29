"""Username/id lookups against the profile table owned by the identity service."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import User
from .errors import NotFound, ValidationFailed


def get_user_or_404(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def find_user_by_username(db: Session, username: str) -> User:
    candidate = username.strip().lower()
    if not candidate:
        raise ValidationFailed("Username required")
    user = db.scalar(select(User).where(func.lower(User.username) == candidate))
    if user is None:
        raise NotFound("User not found")
    return user


def resolve_user_ref(db: Session, *, user_id: UUID | None = None, username: str | None = None) -> User:
    """Resolve a target given either its id or its username (id wins)."""

    if user_id is not None:
        return get_user_or_404(db, user_id)
    if username and username.strip():
        return find_user_by_username(db, username)
    raise ValidationFailed("A user id or username is required")


__all__ = ["get_user_or_404", "find_user_by_username", "resolve_user_ref"]
