"""Conversation list composed from the directory, the guard and read state."""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.orm import Session

from ..models import Conversation, Message, User
from .conversation_service import list_user_conversations
from .message_service import can_read_conversation, latest_message
from .read_state_service import count_unread


@dataclass(slots=True)
class ConversationSummary:
    conversation: Conversation
    other_user: User
    last_message: Message | None
    unread_count: int


def list_conversation_summaries(db: Session, *, user_id: UUID) -> list[ConversationSummary]:
    summaries: list[ConversationSummary] = []
    for conversation in list_user_conversations(db, user_id=user_id):
        # No preview leaks to a participant who currently cannot read the thread.
        preview = None
        if can_read_conversation(db, conversation, user_id):
            preview = latest_message(db, conversation_id=conversation.id)
        summaries.append(
            ConversationSummary(
                conversation=conversation,
                other_user=conversation.other_participant(user_id),
                last_message=preview,
                unread_count=count_unread(db, conversation_id=conversation.id, user_id=user_id),
            )
        )
    return summaries


__all__ = ["ConversationSummary", "list_conversation_summaries"]
