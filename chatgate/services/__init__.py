"""Convenience exports for service layer."""
from .auth_service import create_access_token, decode_access_token, get_current_user
from .block_service import block_user, is_blocked, is_either_blocked, list_blocked, unblock_user
from .chat_request_service import (
    RequestOutcome,
    create_chat_request,
    find_request,
    list_chat_requests,
    respond_to_request,
)
from .conversation_service import (
    find_conversation,
    get_or_create_conversation,
    ordered_pair,
    require_participant,
)
from .errors import (
    ChatServiceError,
    Conflict,
    Forbidden,
    InvalidOperation,
    NotFound,
    StorageFailure,
    Unauthenticated,
    ValidationFailed,
)
from .inbox_service import ConversationSummary, list_conversation_summaries
from .message_service import list_messages, open_conversation, resolve_page_size, send_message
from .profile_service import find_user_by_username, get_user_or_404, resolve_user_ref
from .read_state_service import mark_read, unread_conversation_count, unread_count
from .relationship_service import Relationship, resolve_relationship

__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "block_user",
    "unblock_user",
    "is_blocked",
    "is_either_blocked",
    "list_blocked",
    "RequestOutcome",
    "create_chat_request",
    "find_request",
    "list_chat_requests",
    "respond_to_request",
    "find_conversation",
    "get_or_create_conversation",
    "ordered_pair",
    "require_participant",
    "ChatServiceError",
    "Conflict",
    "Forbidden",
    "InvalidOperation",
    "NotFound",
    "StorageFailure",
    "Unauthenticated",
    "ValidationFailed",
    "ConversationSummary",
    "list_conversation_summaries",
    "list_messages",
    "open_conversation",
    "resolve_page_size",
    "send_message",
    "find_user_by_username",
    "get_user_or_404",
    "resolve_user_ref",
    "mark_read",
    "unread_conversation_count",
    "unread_count",
    "Relationship",
    "resolve_relationship",
]
