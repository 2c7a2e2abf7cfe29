"""Relationship resolver: how a viewer stands with another user."""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.orm import Session

from ..constants import RelationshipStatus
from ..models import ChatRequestStatus
from .block_service import is_blocked
from .chat_request_service import find_request
from .conversation_service import find_conversation


@dataclass(slots=True)
class Relationship:
    status: RelationshipStatus
    request_id: UUID | None = None
    conversation_id: UUID | None = None


def resolve_relationship(db: Session, *, viewer_id: UUID, target_id: UUID) -> Relationship:
    """Summarise the pair from the viewer's side.

    Blocks are checked before requests so a block hides any pending or
    accepted state immediately.
    """

    if viewer_id == target_id:
        return Relationship(status=RelationshipStatus.SELF)
    if is_blocked(db, target_id, viewer_id):
        return Relationship(status=RelationshipStatus.BLOCKED_BY_THEM)
    if is_blocked(db, viewer_id, target_id):
        return Relationship(status=RelationshipStatus.BLOCKED_THEM)

    sent = find_request(db, sender_id=viewer_id, receiver_id=target_id)
    received = find_request(db, sender_id=target_id, receiver_id=viewer_id)

    if sent is not None and sent.status == ChatRequestStatus.PENDING:
        return Relationship(status=RelationshipStatus.PENDING_SENT, request_id=sent.id)
    if received is not None and received.status == ChatRequestStatus.PENDING:
        return Relationship(status=RelationshipStatus.PENDING_RECEIVED, request_id=received.id)

    statuses = {request.status for request in (sent, received) if request is not None}
    if ChatRequestStatus.ACCEPTED in statuses:
        conversation = find_conversation(db, viewer_id, target_id)
        return Relationship(
            status=RelationshipStatus.ACCEPTED,
            conversation_id=conversation.id if conversation is not None else None,
        )

    return Relationship(status=RelationshipStatus.NONE)


__all__ = ["Relationship", "resolve_relationship"]
