"""Project-wide constant values."""
from __future__ import annotations

from enum import StrEnum


class RelationshipStatus(StrEnum):
    """Caller-relative summary of how two users stand with each other."""

    NONE = "none"
    SELF = "self"
    PENDING_SENT = "pending_sent"
    PENDING_RECEIVED = "pending_received"
    ACCEPTED = "accepted"
    BLOCKED_THEM = "blocked_them"
    BLOCKED_BY_THEM = "blocked_by_them"


class ChatRequestAction(StrEnum):
    ACCEPT = "accept"
    DECLINE = "decline"
    BLOCK = "block"


class RequestScope(StrEnum):
    INCOMING = "incoming"
    SENT = "sent"
    ALL = "all"


CONVERSATION_UNAVAILABLE_DETAIL = "Conversation is unavailable"  # shared by every block-gated read/write

__all__ = [
    "RelationshipStatus",
    "ChatRequestAction",
    "RequestScope",
    "CONVERSATION_UNAVAILABLE_DETAIL",
]
