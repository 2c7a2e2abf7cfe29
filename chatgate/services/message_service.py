"""Message channel guard: every read and write of message content goes through here."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import CONVERSATION_UNAVAILABLE_DETAIL
from ..models import Conversation, Message
from ..models.base import utcnow
from .block_service import is_blocked, is_either_blocked
from .conversation_service import require_participant
from .errors import Forbidden, StorageFailure, ValidationFailed

logger = logging.getLogger(__name__)


def can_read_conversation(db: Session, conversation: Conversation, viewer_id: UUID) -> bool:
    """Block state is read fresh on every call; nothing is cached."""

    other_id = conversation.other_participant_id(viewer_id)
    if is_blocked(db, other_id, viewer_id):
        return False
    if not get_settings().blocker_can_read_history and is_blocked(db, viewer_id, other_id):
        return False
    return True


def open_conversation(db: Session, *, conversation_id: UUID, viewer_id: UUID) -> Conversation:
    """Return a conversation the viewer is a participant of and may currently read."""

    conversation = require_participant(db, conversation_id=conversation_id, user_id=viewer_id)
    if not can_read_conversation(db, conversation, viewer_id):
        raise Forbidden(CONVERSATION_UNAVAILABLE_DETAIL)
    return conversation


def resolve_page_size(limit: int | None) -> int:
    """Page size actually used for ``limit`` after applying the default and the cap."""

    settings = get_settings()
    if limit is None:
        return settings.message_page_size
    return max(1, min(limit, settings.message_page_max))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def list_messages(
    db: Session,
    *,
    conversation_id: UUID,
    viewer_id: UUID,
    before: datetime | None = None,
    limit: int | None = None,
) -> list[Message]:
    """Return one page of messages ordered oldest to newest.

    The page holds the newest messages strictly older than ``before``.
    Timestamps carry microseconds, so the cursor assumes no two messages in a
    conversation share one; ties are ordered by id.
    """

    conversation = open_conversation(db, conversation_id=conversation_id, viewer_id=viewer_id)

    stmt = select(Message).where(Message.conversation_id == conversation.id)
    if before is not None:
        stmt = stmt.where(Message.created_at < _as_utc(before))
    stmt = stmt.order_by(Message.created_at.desc(), Message.id.desc()).limit(resolve_page_size(limit))

    messages = list(db.scalars(stmt))
    messages.reverse()
    return messages


def clean_content(content: str | None) -> str:
    text = (content or "").strip()
    if not text:
        raise ValidationFailed("Message content is empty")
    if len(text) > get_settings().message_max_length:
        raise ValidationFailed("Message is too long")
    return text


def send_message(db: Session, *, conversation_id: UUID, sender_id: UUID, content: str | None) -> Message:
    """Append a message after re-checking membership and blocks."""

    text = clean_content(content)
    conversation = require_participant(db, conversation_id=conversation_id, user_id=sender_id)
    other_id = conversation.other_participant_id(sender_id)
    if is_either_blocked(db, sender_id, other_id):
        raise Forbidden(CONVERSATION_UNAVAILABLE_DETAIL)

    message = Message(
        conversation_id=conversation.id,
        sender_id=sender_id,
        content=text,
        created_at=utcnow(),
    )
    try:
        db.add(message)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to persist message in conversation %s", conversation.id)
        raise StorageFailure("Failed to persist message") from exc

    db.refresh(message)
    return message


def latest_message(db: Session, *, conversation_id: UUID) -> Message | None:
    stmt = (
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(1)
    )
    return db.scalars(stmt).first()


__all__ = [
    "can_read_conversation",
    "open_conversation",
    "list_messages",
    "resolve_page_size",
    "clean_content",
    "send_message",
    "latest_message",
]
