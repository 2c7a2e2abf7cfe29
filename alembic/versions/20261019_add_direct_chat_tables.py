"""add block, chat request, conversation, message and read state tables

Revision ID: 20261019_add_direct_chat_tables
Revises: 20261005_create_users
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_add_direct_chat_tables"
down_revision = "20261005_create_users"
branch_labels = None
depends_on = None


def _uuid() -> sa.types.TypeEngine:
    return postgresql.UUID(as_uuid=True)


def upgrade() -> None:
    chat_request_status = sa.Enum("pending", "accepted", "declined", name="chat_request_status")
    chat_request_status.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "user_blocks",
        sa.Column("blocker_id", _uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("blocked_id", _uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("blocker_id", "blocked_id", name="pk_user_blocks"),
    )
    op.create_index("ix_user_blocks_blocked_id", "user_blocks", ["blocked_id"])

    op.create_table(
        "chat_requests",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("sender_id", _uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("receiver_id", _uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", chat_request_status, nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("responded_at", sa.DateTime(timezone=True)),
        sa.UniqueConstraint("sender_id", "receiver_id", name="uq_chat_request_pair"),
    )
    op.create_index("ix_chat_requests_sender_id", "chat_requests", ["sender_id"])
    op.create_index("ix_chat_requests_receiver_id", "chat_requests", ["receiver_id"])

    op.create_table(
        "conversations",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("user_a_id", _uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_b_id", _uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_a_id", "user_b_id", name="uq_conversation_pair"),
        sa.CheckConstraint("user_a_id <> user_b_id", name="ck_conversation_distinct_users"),
    )
    op.create_index("ix_conversations_user_a_id", "conversations", ["user_a_id"])
    op.create_index("ix_conversations_user_b_id", "conversations", ["user_b_id"])

    op.create_table(
        "messages",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("conversation_id", _uuid(), sa.ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sender_id", _uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"])
    op.create_index("ix_messages_conversation_created", "messages", ["conversation_id", "created_at"])

    op.create_table(
        "conversation_read_states",
        sa.Column("user_id", _uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("conversation_id", _uuid(), sa.ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("last_read_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id", "conversation_id", name="pk_conversation_read_states"),
    )


def downgrade() -> None:
    op.drop_table("conversation_read_states")

    op.drop_index("ix_messages_conversation_created", table_name="messages")
    op.drop_index("ix_messages_sender_id", table_name="messages")
    op.drop_table("messages")

    op.drop_index("ix_conversations_user_b_id", table_name="conversations")
    op.drop_index("ix_conversations_user_a_id", table_name="conversations")
    op.drop_table("conversations")

    op.drop_index("ix_chat_requests_receiver_id", table_name="chat_requests")
    op.drop_index("ix_chat_requests_sender_id", table_name="chat_requests")
    op.drop_table("chat_requests")

    op.drop_index("ix_user_blocks_blocked_id", table_name="user_blocks")
    op.drop_table("user_blocks")

    chat_request_status = sa.Enum("pending", "accepted", "declined", name="chat_request_status")
    chat_request_status.drop(op.get_bind(), checkfirst=True)
