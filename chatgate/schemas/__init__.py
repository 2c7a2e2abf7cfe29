"""Convenience exports for schema layer."""
from .blocks import BlockActionResponse, BlockedListResponse, BlockedUserResponse
from .conversations import (
    ConversationDetailResponse,
    ConversationListResponse,
    ConversationSummaryResponse,
    ReadStateResponse,
    UnreadCountResponse,
)
from .messages import MessagePageResponse, MessageResponse, MessageSendRequest
from .profiles import UserSummary
from .relationships import (
    ChatRequestCreate,
    ChatRequestRespondPayload,
    ChatRequestRespondResponse,
    ChatRequestResponse,
    ChatRequestsOverviewResponse,
    IncomingChatRequest,
    RelationshipResponse,
    SentChatRequest,
)

__all__ = [
    "BlockActionResponse",
    "BlockedListResponse",
    "BlockedUserResponse",
    "ConversationDetailResponse",
    "ConversationListResponse",
    "ConversationSummaryResponse",
    "ReadStateResponse",
    "UnreadCountResponse",
    "MessagePageResponse",
    "MessageResponse",
    "MessageSendRequest",
    "UserSummary",
    "ChatRequestCreate",
    "ChatRequestRespondPayload",
    "ChatRequestRespondResponse",
    "ChatRequestResponse",
    "ChatRequestsOverviewResponse",
    "IncomingChatRequest",
    "RelationshipResponse",
    "SentChatRequest",
]
