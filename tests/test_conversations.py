"""Conversation directory, message guard and read-state behaviour."""
from __future__ import annotations

import uuid

import pytest
from sqlalchemy import func, select

from chatgate.constants import ChatRequestAction
from chatgate.models import Conversation, ConversationReadState, Message
from chatgate.models.base import utcnow
from chatgate.services import (
    Forbidden,
    InvalidOperation,
    NotFound,
    ValidationFailed,
    block_user,
    create_chat_request,
    find_conversation,
    get_or_create_conversation,
    list_conversation_summaries,
    list_messages,
    mark_read,
    open_conversation,
    ordered_pair,
    require_participant,
    respond_to_request,
    send_message,
    unblock_user,
    unread_conversation_count,
    unread_count,
)
from chatgate.services.message_service import latest_message


def _connect(db, sender, receiver) -> Conversation:
    request = create_chat_request(db, sender_id=sender.id, receiver_id=receiver.id)
    outcome = respond_to_request(db, request_id=request.id, responder_id=receiver.id, action=ChatRequestAction.ACCEPT)
    assert outcome.conversation is not None
    return outcome.conversation


def test_conversation_pair_is_canonical(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    first = get_or_create_conversation(db, alice.id, bob.id)
    second = get_or_create_conversation(db, bob.id, alice.id)

    assert first.id == second.id
    assert (first.user_a_id, first.user_b_id) == ordered_pair(alice.id, bob.id)
    assert str(first.user_a_id) < str(first.user_b_id)
    assert find_conversation(db, bob.id, alice.id).id == first.id
    assert db.scalar(select(func.count()).select_from(Conversation)) == 1


def test_conversation_with_self_is_rejected(db, user_factory):
    alice = user_factory("alice")
    with pytest.raises(InvalidOperation):
        get_or_create_conversation(db, alice.id, alice.id)


def test_accept_reuses_existing_conversation(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    existing = get_or_create_conversation(db, alice.id, bob.id)

    conversation = _connect(db, bob, alice)

    assert conversation.id == existing.id


def test_require_participant(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    mallory = user_factory("mallory")
    conversation = _connect(db, alice, bob)

    assert require_participant(db, conversation_id=conversation.id, user_id=bob.id).id == conversation.id
    with pytest.raises(Forbidden):
        require_participant(db, conversation_id=conversation.id, user_id=mallory.id)
    with pytest.raises(NotFound):
        require_participant(db, conversation_id=uuid.uuid4(), user_id=alice.id)


def test_send_and_list_messages(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    conversation = _connect(db, alice, bob)

    first = send_message(db, conversation_id=conversation.id, sender_id=alice.id, content="  hi bob  ")
    second = send_message(db, conversation_id=conversation.id, sender_id=bob.id, content="hey")

    assert first.content == "hi bob"
    messages = list_messages(db, conversation_id=conversation.id, viewer_id=bob.id)
    assert [message.id for message in messages] == [first.id, second.id]


def test_message_pages_walk_backwards(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    conversation = _connect(db, alice, bob)
    sent = [
        send_message(db, conversation_id=conversation.id, sender_id=alice.id, content=f"message {index}")
        for index in range(5)
    ]

    newest = list_messages(db, conversation_id=conversation.id, viewer_id=alice.id, limit=2)
    assert [message.content for message in newest] == ["message 3", "message 4"]

    older = list_messages(
        db,
        conversation_id=conversation.id,
        viewer_id=alice.id,
        before=newest[0].created_at,
        limit=2,
    )
    assert [message.content for message in older] == ["message 1", "message 2"]

    oldest = list_messages(
        db,
        conversation_id=conversation.id,
        viewer_id=alice.id,
        before=older[0].created_at,
        limit=2,
    )
    assert [message.id for message in oldest] == [sent[0].id]


def test_page_size_is_capped(db, user_factory, settings, monkeypatch):
    monkeypatch.setattr(settings, "message_page_max", 3)
    alice = user_factory("alice")
    bob = user_factory("bob")
    conversation = _connect(db, alice, bob)
    for index in range(4):
        send_message(db, conversation_id=conversation.id, sender_id=bob.id, content=str(index))

    page = list_messages(db, conversation_id=conversation.id, viewer_id=alice.id, limit=500)
    assert len(page) == 3


@pytest.mark.parametrize("content", ["", "   ", None])
def test_empty_message_is_rejected(db, user_factory, content):
    alice = user_factory("alice")
    bob = user_factory("bob")
    conversation = _connect(db, alice, bob)

    with pytest.raises(ValidationFailed):
        send_message(db, conversation_id=conversation.id, sender_id=alice.id, content=content)
    assert db.scalar(select(func.count()).select_from(Message)) == 0


def test_message_length_limit(db, user_factory, settings, monkeypatch):
    monkeypatch.setattr(settings, "message_max_length", 5)
    alice = user_factory("alice")
    bob = user_factory("bob")
    conversation = _connect(db, alice, bob)

    send_message(db, conversation_id=conversation.id, sender_id=alice.id, content="12345")
    with pytest.raises(ValidationFailed):
        send_message(db, conversation_id=conversation.id, sender_id=alice.id, content="123456")


def test_outsider_cannot_read_or_send(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    mallory = user_factory("mallory")
    conversation = _connect(db, alice, bob)

    with pytest.raises(Forbidden):
        list_messages(db, conversation_id=conversation.id, viewer_id=mallory.id)
    with pytest.raises(Forbidden):
        send_message(db, conversation_id=conversation.id, sender_id=mallory.id, content="let me in")
    with pytest.raises(NotFound):
        send_message(db, conversation_id=uuid.uuid4(), sender_id=alice.id, content="anyone?")


def test_block_closes_channel_for_both_senders(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    conversation = _connect(db, alice, bob)
    send_message(db, conversation_id=conversation.id, sender_id=bob.id, content="before the block")

    block_user(db, blocker_id=alice.id, blocked_id=bob.id)

    for sender in (alice, bob):
        with pytest.raises(Forbidden):
            send_message(db, conversation_id=conversation.id, sender_id=sender.id, content="still there?")


def test_blocked_user_loses_history_but_blocker_keeps_it(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    conversation = _connect(db, alice, bob)
    send_message(db, conversation_id=conversation.id, sender_id=bob.id, content="hello")

    block_user(db, blocker_id=alice.id, blocked_id=bob.id)

    history = list_messages(db, conversation_id=conversation.id, viewer_id=alice.id)
    assert [message.content for message in history] == ["hello"]
    with pytest.raises(Forbidden):
        list_messages(db, conversation_id=conversation.id, viewer_id=bob.id)
    with pytest.raises(Forbidden):
        open_conversation(db, conversation_id=conversation.id, viewer_id=bob.id)

    unblock_user(db, blocker_id=alice.id, blocked_id=bob.id)
    assert len(list_messages(db, conversation_id=conversation.id, viewer_id=bob.id)) == 1
    send_message(db, conversation_id=conversation.id, sender_id=bob.id, content="thanks")


def test_blocker_history_can_be_hidden_by_setting(db, user_factory, settings, monkeypatch):
    monkeypatch.setattr(settings, "blocker_can_read_history", False)
    alice = user_factory("alice")
    bob = user_factory("bob")
    conversation = _connect(db, alice, bob)
    block_user(db, blocker_id=alice.id, blocked_id=bob.id)

    with pytest.raises(Forbidden):
        list_messages(db, conversation_id=conversation.id, viewer_id=alice.id)


def test_unread_counts_follow_read_state(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    conversation = _connect(db, alice, bob)

    assert unread_count(db, conversation_id=conversation.id, user_id=alice.id) == 0
    assert unread_conversation_count(db, user_id=alice.id) == 0

    send_message(db, conversation_id=conversation.id, sender_id=bob.id, content="one")
    send_message(db, conversation_id=conversation.id, sender_id=bob.id, content="two")

    assert unread_count(db, conversation_id=conversation.id, user_id=alice.id) == 2
    assert unread_count(db, conversation_id=conversation.id, user_id=bob.id) == 0
    assert unread_conversation_count(db, user_id=alice.id) == 1
    assert unread_conversation_count(db, user_id=bob.id) == 0

    state = mark_read(db, conversation_id=conversation.id, user_id=alice.id)
    assert state.last_read_at is not None
    assert unread_count(db, conversation_id=conversation.id, user_id=alice.id) == 0
    assert unread_conversation_count(db, user_id=alice.id) == 0

    send_message(db, conversation_id=conversation.id, sender_id=bob.id, content="three")
    assert unread_count(db, conversation_id=conversation.id, user_id=alice.id) == 1
    assert unread_conversation_count(db, user_id=alice.id) == 1


def test_replying_clears_unread_conversation_flag(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    conversation = _connect(db, alice, bob)
    send_message(db, conversation_id=conversation.id, sender_id=bob.id, content="ping")
    send_message(db, conversation_id=conversation.id, sender_id=alice.id, content="pong")

    # Latest message is alice's own reply, so the thread is not flagged.
    assert unread_conversation_count(db, user_id=alice.id) == 0
    assert unread_conversation_count(db, user_id=bob.id) == 1


def test_mark_read_twice_keeps_one_row(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    conversation = _connect(db, alice, bob)

    mark_read(db, conversation_id=conversation.id, user_id=alice.id)
    mark_read(db, conversation_id=conversation.id, user_id=alice.id)

    rows = db.scalar(select(func.count()).select_from(ConversationReadState))
    assert rows == 1


def test_mark_read_requires_membership(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    mallory = user_factory("mallory")
    conversation = _connect(db, alice, bob)

    with pytest.raises(Forbidden):
        mark_read(db, conversation_id=conversation.id, user_id=mallory.id)
    with pytest.raises(NotFound):
        mark_read(db, conversation_id=uuid.uuid4(), user_id=alice.id)


def test_conversation_summaries_hide_preview_when_unreadable(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    carol = user_factory("carol")
    with_bob = _connect(db, alice, bob)
    with_carol = _connect(db, carol, alice)
    send_message(db, conversation_id=with_bob.id, sender_id=bob.id, content="from bob")
    send_message(db, conversation_id=with_carol.id, sender_id=carol.id, content="from carol")

    block_user(db, blocker_id=bob.id, blocked_id=alice.id)

    summaries = {summary.other_user.username: summary for summary in list_conversation_summaries(db, user_id=alice.id)}
    assert set(summaries) == {"bob", "carol"}
    assert summaries["bob"].last_message is None
    assert summaries["bob"].unread_count == 1
    assert summaries["carol"].last_message is not None
    assert summaries["carol"].last_message.content == "from carol"

    bob_view = list_conversation_summaries(db, user_id=bob.id)
    assert len(bob_view) == 1
    assert bob_view[0].last_message.content == "from bob"


def test_messages_sharing_a_timestamp_are_ordered_by_id(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    conversation = _connect(db, alice, bob)
    stamp = utcnow()
    twins = [
        Message(conversation_id=conversation.id, sender_id=sender.id, content=sender.username, created_at=stamp)
        for sender in (alice, bob)
    ]
    db.add_all(twins)
    db.commit()

    expected = sorted(twins, key=lambda message: message.id.hex)
    page = list_messages(db, conversation_id=conversation.id, viewer_id=alice.id)
    assert [message.id for message in page] == [message.id for message in expected]
    assert latest_message(db, conversation_id=conversation.id).id == expected[-1].id
