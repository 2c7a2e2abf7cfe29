"""Business logic for chat requests: the handshake that opens a conversation."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import assert_never
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..constants import ChatRequestAction, RequestScope
from ..models import ChatRequest, ChatRequestStatus, Conversation
from ..models.base import utcnow
from .block_service import block_user, is_either_blocked
from .conversation_service import stage_conversation
from .errors import Conflict, Forbidden, InvalidOperation, NotFound, StorageFailure
from .profile_service import resolve_user_ref

logger = logging.getLogger(__name__)

_FORBIDDEN_DETAIL = "Cannot send a chat request to this user"
_PENDING_DETAIL = "Chat request already pending"
_ACTIVE_DETAIL = "A conversation with this user already exists"
_PROCESSED_DETAIL = "Request already processed"

# Accept can lose a conversation insert race at most once; the retry finds the row.
_ACCEPT_ATTEMPTS = 2


@dataclass(slots=True)
class RequestOutcome:
    request: ChatRequest
    action: ChatRequestAction
    conversation: Conversation | None = None


def find_request(db: Session, *, sender_id: UUID, receiver_id: UUID) -> ChatRequest | None:
    stmt = select(ChatRequest).where(ChatRequest.sender_id == sender_id, ChatRequest.receiver_id == receiver_id)
    return db.scalars(stmt).first()


def _commit(db: Session, failure_detail: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(failure_detail)
        raise StorageFailure(failure_detail) from exc


def _reopen_declined(db: Session, request: ChatRequest) -> ChatRequest:
    # created_at is kept, so a re-sent request lists by its first send time.
    result = db.execute(
        update(ChatRequest)
        .where(ChatRequest.id == request.id, ChatRequest.status == ChatRequestStatus.DECLINED)
        .values(status=ChatRequestStatus.PENDING, responded_at=None)
    )
    if result.rowcount != 1:
        db.rollback()
        raise Conflict(_PENDING_DETAIL)
    _commit(db, "Failed to resend chat request")
    db.refresh(request)
    logger.info("Chat request %s reopened by %s", request.id, request.sender_id)
    return request


def create_chat_request(
    db: Session,
    *,
    sender_id: UUID,
    receiver_id: UUID | None = None,
    receiver_username: str | None = None,
) -> ChatRequest:
    receiver = resolve_user_ref(db, user_id=receiver_id, username=receiver_username)
    target_id: UUID = receiver.id
    if target_id == sender_id:
        raise InvalidOperation("Cannot send a chat request to yourself")

    if is_either_blocked(db, sender_id, target_id):
        raise Forbidden(_FORBIDDEN_DETAIL)

    existing = find_request(db, sender_id=sender_id, receiver_id=target_id)
    if existing is not None:
        if existing.status == ChatRequestStatus.PENDING:
            raise Conflict(_PENDING_DETAIL)
        if existing.status == ChatRequestStatus.ACCEPTED:
            raise Conflict(_ACTIVE_DETAIL)

    reverse = find_request(db, sender_id=target_id, receiver_id=sender_id)
    if reverse is not None and reverse.status == ChatRequestStatus.ACCEPTED:
        raise Conflict(_ACTIVE_DETAIL)

    if existing is not None:
        return _reopen_declined(db, existing)

    request = ChatRequest(sender_id=sender_id, receiver_id=target_id, status=ChatRequestStatus.PENDING)
    db.add(request)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Duplicate chat request %s -> %s rejected", sender_id, target_id)
        raise Conflict(_PENDING_DETAIL) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to send chat request %s -> %s", sender_id, target_id)
        raise StorageFailure("Failed to send chat request") from exc

    db.refresh(request)
    logger.info("Chat request %s sent %s -> %s", request.id, sender_id, target_id)
    return request


def list_chat_requests(
    db: Session,
    *,
    user_id: UUID,
    scope: RequestScope = RequestScope.ALL,
) -> tuple[list[ChatRequest], list[ChatRequest]]:
    """Return pending (incoming, sent) requests, newest first."""

    incoming: list[ChatRequest] = []
    sent: list[ChatRequest] = []
    if scope in (RequestScope.INCOMING, RequestScope.ALL):
        incoming_stmt = (
            select(ChatRequest)
            .where(ChatRequest.receiver_id == user_id, ChatRequest.status == ChatRequestStatus.PENDING)
            .options(selectinload(ChatRequest.sender))
            .order_by(ChatRequest.created_at.desc())
        )
        incoming = list(db.scalars(incoming_stmt))
    if scope in (RequestScope.SENT, RequestScope.ALL):
        sent_stmt = (
            select(ChatRequest)
            .where(ChatRequest.sender_id == user_id, ChatRequest.status == ChatRequestStatus.PENDING)
            .options(selectinload(ChatRequest.receiver))
            .order_by(ChatRequest.created_at.desc())
        )
        sent = list(db.scalars(sent_stmt))
    return incoming, sent


def _claim_pending(db: Session, request: ChatRequest, new_status: ChatRequestStatus) -> None:
    """Move a pending request to ``new_status``; only one caller can win."""

    result = db.execute(
        update(ChatRequest)
        .where(ChatRequest.id == request.id, ChatRequest.status == ChatRequestStatus.PENDING)
        .values(status=new_status, responded_at=utcnow())
    )
    if result.rowcount != 1:
        db.rollback()
        raise Conflict(_PROCESSED_DETAIL)


def _close_reverse_request(db: Session, request: ChatRequest) -> None:
    db.execute(
        update(ChatRequest)
        .where(
            ChatRequest.sender_id == request.receiver_id,
            ChatRequest.receiver_id == request.sender_id,
            ChatRequest.status == ChatRequestStatus.PENDING,
        )
        .values(status=ChatRequestStatus.ACCEPTED, responded_at=utcnow())
    )


def _accept(db: Session, request: ChatRequest) -> Conversation:
    sender_id: UUID = request.sender_id
    receiver_id: UUID = request.receiver_id
    if is_either_blocked(db, sender_id, receiver_id):
        raise Forbidden("Cannot accept this chat request")

    for _ in range(_ACCEPT_ATTEMPTS):
        _claim_pending(db, request, ChatRequestStatus.ACCEPTED)
        _close_reverse_request(db, request)
        conversation = stage_conversation(db, sender_id, receiver_id)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning("Conversation for request %s was created concurrently; retrying", request.id)
            continue
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Failed to accept chat request %s", request.id)
            raise StorageFailure("Failed to accept chat request") from exc
        db.refresh(request)
        db.refresh(conversation)
        logger.info("Chat request %s accepted; conversation %s", request.id, conversation.id)
        return conversation

    raise StorageFailure("Failed to open conversation")


def _decline(db: Session, request: ChatRequest) -> None:
    _claim_pending(db, request, ChatRequestStatus.DECLINED)
    _commit(db, "Failed to decline chat request")
    db.refresh(request)
    logger.info("Chat request %s declined", request.id)


def respond_to_request(
    db: Session,
    *,
    request_id: UUID,
    responder_id: UUID,
    action: ChatRequestAction,
) -> RequestOutcome:
    action = ChatRequestAction(action)
    request = db.get(ChatRequest, request_id)
    if request is None:
        raise NotFound("Chat request not found")
    if request.receiver_id != responder_id:
        raise Forbidden("Only the recipient can respond to this request")
    if request.status != ChatRequestStatus.PENDING:
        raise Conflict(_PROCESSED_DETAIL)

    if action is ChatRequestAction.ACCEPT:
        conversation = _accept(db, request)
        return RequestOutcome(request=request, action=action, conversation=conversation)
    elif action is ChatRequestAction.DECLINE:
        _decline(db, request)
    elif action is ChatRequestAction.BLOCK:
        # Block always implies decline.
        block_user(db, blocker_id=responder_id, blocked_id=request.sender_id)
        _decline(db, request)
    else:
        assert_never(action)
    return RequestOutcome(request=request, action=action)


__all__ = [
    "RequestOutcome",
    "find_request",
    "create_chat_request",
    "list_chat_requests",
    "respond_to_request",
]
