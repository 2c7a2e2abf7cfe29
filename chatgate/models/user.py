"""SQLAlchemy ORM model for users known to the chat service."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from chatgate.database import Base
from .base import utcnow


class User(Base):
    """Profile row owned by the identity service; read-only from here."""

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(150), unique=True, nullable=False, index=True)
    display_name = Column(String(150), nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    blocks_made = relationship(
        "UserBlock",
        foreign_keys="UserBlock.blocker_id",
        back_populates="blocker",
        cascade="all, delete-orphan",
    )
    blocks_received = relationship(
        "UserBlock",
        foreign_keys="UserBlock.blocked_id",
        back_populates="blocked",
        cascade="all, delete-orphan",
    )
    chat_requests_sent = relationship(
        "ChatRequest",
        foreign_keys="ChatRequest.sender_id",
        back_populates="sender",
        cascade="all, delete-orphan",
    )
    chat_requests_received = relationship(
        "ChatRequest",
        foreign_keys="ChatRequest.receiver_id",
        back_populates="receiver",
        cascade="all, delete-orphan",
    )


__all__ = ["User"]
