"""Read-state bookkeeping used for unread counters."""
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import ConversationReadState, Message
from ..models.base import utcnow
from .conversation_service import list_user_conversations, require_participant
from .errors import StorageFailure
from .message_service import latest_message

logger = logging.getLogger(__name__)


def get_read_state(db: Session, *, conversation_id: UUID, user_id: UUID) -> ConversationReadState | None:
    return db.get(ConversationReadState, (user_id, conversation_id))


def _stage_read_state(db: Session, *, conversation_id: UUID, user_id: UUID) -> ConversationReadState:
    now = utcnow()
    state = get_read_state(db, conversation_id=conversation_id, user_id=user_id)
    if state is None:
        state = ConversationReadState(user_id=user_id, conversation_id=conversation_id, last_read_at=now)
        db.add(state)
    else:
        state.last_read_at = now
    return state


def mark_read(db: Session, *, conversation_id: UUID, user_id: UUID) -> ConversationReadState:
    """Upsert ``last_read_at = now`` for a participant of the conversation."""

    conversation = require_participant(db, conversation_id=conversation_id, user_id=user_id)
    state = _stage_read_state(db, conversation_id=conversation.id, user_id=user_id)
    try:
        db.commit()
    except IntegrityError:
        # Another request inserted the row first; update it instead.
        db.rollback()
        state = _stage_read_state(db, conversation_id=conversation.id, user_id=user_id)
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Failed to update read state for %s in %s", user_id, conversation.id)
            raise StorageFailure("Failed to update read state") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update read state for %s in %s", user_id, conversation.id)
        raise StorageFailure("Failed to update read state") from exc

    db.refresh(state)
    return state


def count_unread(db: Session, *, conversation_id: UUID, user_id: UUID) -> int:
    """Count messages from the other participant newer than the user's last read."""

    stmt = (
        select(func.count())
        .select_from(Message)
        .where(Message.conversation_id == conversation_id, Message.sender_id != user_id)
    )
    state = get_read_state(db, conversation_id=conversation_id, user_id=user_id)
    if state is not None:
        stmt = stmt.where(Message.created_at > state.last_read_at)
    return int(db.scalar(stmt) or 0)


def unread_count(db: Session, *, conversation_id: UUID, user_id: UUID) -> int:
    conversation = require_participant(db, conversation_id=conversation_id, user_id=user_id)
    return count_unread(db, conversation_id=conversation.id, user_id=user_id)


def unread_conversation_count(db: Session, *, user_id: UUID) -> int:
    """Number of conversations whose latest message is an unread one from the other side."""

    total = 0
    for conversation in list_user_conversations(db, user_id=user_id):
        last = latest_message(db, conversation_id=conversation.id)
        if last is None or last.sender_id == user_id:
            continue
        state = get_read_state(db, conversation_id=conversation.id, user_id=user_id)
        if state is None or last.created_at > state.last_read_at:
            total += 1
    return total


__all__ = [
    "get_read_state",
    "mark_read",
    "count_unread",
    "unread_count",
    "unread_conversation_count",
]
