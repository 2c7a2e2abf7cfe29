"""Conversation directory: one canonically ordered conversation per user pair."""
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..models import Conversation
from .errors import Forbidden, InvalidOperation, NotFound, StorageFailure

logger = logging.getLogger(__name__)


def ordered_pair(a: UUID, b: UUID) -> tuple[UUID, UUID]:
    return (a, b) if str(a) < str(b) else (b, a)


def find_conversation(db: Session, user_id: UUID, other_id: UUID) -> Conversation | None:
    first, second = ordered_pair(user_id, other_id)
    stmt = select(Conversation).where(and_(Conversation.user_a_id == first, Conversation.user_b_id == second))
    return db.scalars(stmt).first()


def stage_conversation(db: Session, user_id: UUID, other_id: UUID) -> Conversation:
    """Return the pair's conversation, adding a new one to the session when missing.

    Nothing is committed; callers that stage a new row own the commit.
    """

    if user_id == other_id:
        raise InvalidOperation("A conversation needs two different users")
    existing = find_conversation(db, user_id, other_id)
    if existing is not None:
        return existing
    user_a_id, user_b_id = ordered_pair(user_id, other_id)
    conversation = Conversation(user_a_id=user_a_id, user_b_id=user_b_id)
    db.add(conversation)
    return conversation


def get_or_create_conversation(db: Session, user_id: UUID, other_id: UUID) -> Conversation:
    conversation = stage_conversation(db, user_id, other_id)
    if conversation not in db.new:
        return conversation

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = find_conversation(db, user_id, other_id)
        if existing is None:
            logger.exception("Conversation insert for %s/%s failed without a competing row", user_id, other_id)
            raise StorageFailure("Failed to create conversation")
        logger.warning("Conversation for %s/%s was created concurrently; reusing %s", user_id, other_id, existing.id)
        return existing
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create conversation for %s/%s", user_id, other_id)
        raise StorageFailure("Failed to create conversation") from exc

    db.refresh(conversation)
    logger.info("Conversation %s opened between %s and %s", conversation.id, user_id, other_id)
    return conversation


def require_participant(db: Session, *, conversation_id: UUID, user_id: UUID) -> Conversation:
    conversation = db.get(Conversation, conversation_id)
    if conversation is None:
        raise NotFound("Conversation not found")
    if not conversation.involves(user_id):
        raise Forbidden("You are not part of this conversation")
    return conversation


def list_user_conversations(db: Session, *, user_id: UUID) -> list[Conversation]:
    stmt = (
        select(Conversation)
        .where(or_(Conversation.user_a_id == user_id, Conversation.user_b_id == user_id))
        .options(selectinload(Conversation.user_a), selectinload(Conversation.user_b))
        .order_by(Conversation.created_at.desc())
    )
    return list(db.scalars(stmt))


__all__ = [
    "ordered_pair",
    "find_conversation",
    "stage_conversation",
    "get_or_create_conversation",
    "require_participant",
    "list_user_conversations",
]
