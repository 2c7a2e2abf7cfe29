"""ORM model representing directed chat requests between users."""
from __future__ import annotations

import uuid
from enum import StrEnum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from chatgate.database import Base
from .base import utcnow


class ChatRequestStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class ChatRequest(Base):
    __tablename__ = "chat_requests"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    sender_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(
            ChatRequestStatus,
            name="chat_request_status",
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=ChatRequestStatus.PENDING,
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    responded_at = Column(DateTime(timezone=True), nullable=True)

    sender = relationship("User", foreign_keys=[sender_id], back_populates="chat_requests_sent")
    receiver = relationship("User", foreign_keys=[receiver_id], back_populates="chat_requests_received")

    __table_args__ = (UniqueConstraint("sender_id", "receiver_id", name="uq_chat_request_pair"),)


__all__ = ["ChatRequest", "ChatRequestStatus"]
