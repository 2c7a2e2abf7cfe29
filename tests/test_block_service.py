"""Block registry behaviour."""
from __future__ import annotations

import uuid

import pytest
from sqlalchemy import func, select

from chatgate.models import UserBlock
from chatgate.services import (
    InvalidOperation,
    NotFound,
    block_user,
    is_blocked,
    is_either_blocked,
    list_blocked,
    unblock_user,
)


def test_block_is_directed(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    assert block_user(db, blocker_id=alice.id, blocked_id=bob.id) is True

    assert is_blocked(db, alice.id, bob.id) is True
    assert is_blocked(db, bob.id, alice.id) is False
    assert is_either_blocked(db, bob.id, alice.id) is True


def test_block_twice_keeps_a_single_edge(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    assert block_user(db, blocker_id=alice.id, blocked_id=bob.id) is True
    assert block_user(db, blocker_id=alice.id, blocked_id=bob.id) is False

    count = db.scalar(select(func.count()).select_from(UserBlock).where(UserBlock.blocker_id == alice.id))
    assert count == 1


def test_block_self_is_rejected(db, user_factory):
    alice = user_factory("alice")
    with pytest.raises(InvalidOperation) as exc:
        block_user(db, blocker_id=alice.id, blocked_id=alice.id)
    assert exc.value.status_code == 400


def test_block_unknown_user(db, user_factory):
    alice = user_factory("alice")
    with pytest.raises(NotFound):
        block_user(db, blocker_id=alice.id, blocked_id=uuid.uuid4())


def test_unblock_is_idempotent(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    block_user(db, blocker_id=alice.id, blocked_id=bob.id)

    assert unblock_user(db, blocker_id=alice.id, blocked_id=bob.id) is True
    assert unblock_user(db, blocker_id=alice.id, blocked_id=bob.id) is False
    assert is_blocked(db, alice.id, bob.id) is False


def test_unblock_only_removes_own_edge(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    block_user(db, blocker_id=alice.id, blocked_id=bob.id)

    assert unblock_user(db, blocker_id=bob.id, blocked_id=alice.id) is False
    assert is_blocked(db, alice.id, bob.id) is True


def test_list_blocked_newest_first(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    carol = user_factory("carol")
    block_user(db, blocker_id=alice.id, blocked_id=bob.id)
    block_user(db, blocker_id=alice.id, blocked_id=carol.id)

    records = list_blocked(db, blocker_id=alice.id)
    assert [record.blocked.username for record in records] == ["carol", "bob"]
    assert list_blocked(db, blocker_id=bob.id) == []
