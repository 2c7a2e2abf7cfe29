"""Block registry: directed block edges between users."""
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..models import UserBlock
from .errors import InvalidOperation, StorageFailure
from .profile_service import get_user_or_404

logger = logging.getLogger(__name__)


def is_blocked(db: Session, blocker_id: UUID, blocked_id: UUID) -> bool:
    """Return True when ``blocker_id`` currently blocks ``blocked_id``."""

    stmt = select(UserBlock.blocker_id).where(
        UserBlock.blocker_id == blocker_id,
        UserBlock.blocked_id == blocked_id,
    )
    return db.scalar(stmt) is not None


def is_either_blocked(db: Session, first_id: UUID, second_id: UUID) -> bool:
    stmt = select(UserBlock.blocker_id).where(
        or_(
            and_(UserBlock.blocker_id == first_id, UserBlock.blocked_id == second_id),
            and_(UserBlock.blocker_id == second_id, UserBlock.blocked_id == first_id),
        )
    )
    return db.scalars(stmt).first() is not None


def block_user(db: Session, *, blocker_id: UUID, blocked_id: UUID) -> bool:
    """Record a block edge. Returns False when the edge already existed."""

    if blocker_id == blocked_id:
        raise InvalidOperation("Cannot block yourself")
    get_user_or_404(db, blocked_id)

    if is_blocked(db, blocker_id, blocked_id):
        return False

    db.add(UserBlock(blocker_id=blocker_id, blocked_id=blocked_id))
    try:
        db.commit()
    except IntegrityError:
        # A concurrent call inserted the same edge first.
        db.rollback()
        logger.warning("Block %s -> %s already recorded", blocker_id, blocked_id)
        return False
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to block user %s for %s", blocked_id, blocker_id)
        raise StorageFailure("Unable to block user") from exc

    logger.info("User %s blocked %s", blocker_id, blocked_id)
    return True


def unblock_user(db: Session, *, blocker_id: UUID, blocked_id: UUID) -> bool:
    """Remove a block edge. Returns False when there was nothing to remove."""

    record = db.get(UserBlock, (blocker_id, blocked_id))
    if record is None:
        return False
    try:
        db.delete(record)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to unblock user %s for %s", blocked_id, blocker_id)
        raise StorageFailure("Unable to unblock user") from exc

    logger.info("User %s unblocked %s", blocker_id, blocked_id)
    return True


def list_blocked(db: Session, *, blocker_id: UUID) -> list[UserBlock]:
    stmt = (
        select(UserBlock)
        .where(UserBlock.blocker_id == blocker_id)
        .options(selectinload(UserBlock.blocked))
        .order_by(UserBlock.created_at.desc())
    )
    return list(db.scalars(stmt))


__all__ = ["is_blocked", "is_either_blocked", "block_user", "unblock_user", "list_blocked"]
