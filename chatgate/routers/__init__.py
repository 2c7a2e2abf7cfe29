"""Aggregate router exports."""
from .blocks import router as blocks_router
from .chat_requests import router as chat_requests_router
from .conversations import router as conversations_router

__all__ = [
    "blocks_router",
    "chat_requests_router",
    "conversations_router",
]
