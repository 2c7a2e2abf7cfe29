"""Convenience exports for ORM models."""
from .chat_request import ChatRequest, ChatRequestStatus
from .conversation import Conversation
from .message import Message
from .read_state import ConversationReadState
from .user import User
from .user_block import UserBlock

__all__ = [
    "ChatRequest",
    "ChatRequestStatus",
    "Conversation",
    "ConversationReadState",
    "Message",
    "User",
    "UserBlock",
]
