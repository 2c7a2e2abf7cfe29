"""Shared fixtures for the chat access tests."""
from __future__ import annotations

import os
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete
from sqlalchemy.orm import Session

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///./test_chatgate.db"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from chatgate.config import get_settings  # noqa: E402
from chatgate.database import Base, SessionLocal, engine  # noqa: E402
from chatgate.main import app  # noqa: E402
from chatgate.models import (  # noqa: E402
    ChatRequest,
    Conversation,
    ConversationReadState,
    Message,
    User,
    UserBlock,
)
from chatgate.services import get_current_user  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        session.execute(delete(ConversationReadState))
        session.execute(delete(Message))
        session.execute(delete(Conversation))
        session.execute(delete(ChatRequest))
        session.execute(delete(UserBlock))
        session.execute(delete(User))
        session.commit()
    yield


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def db() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_factory() -> Callable[[str], User]:
    def _factory(username: str) -> User:
        with SessionLocal() as session:
            user = User(username=username, display_name=username.title())
            session.add(user)
            session.commit()
            session.refresh(user)
            return user
    return _factory


@pytest.fixture
def authed_client() -> Iterator[Callable[[User], TestClient]]:
    with TestClient(app) as client:
        def _with_user(user: User) -> TestClient:
            def _override() -> User:
                return user
            app.dependency_overrides[get_current_user] = _override
            return client
        yield _with_user
    app.dependency_overrides.clear()


@pytest.fixture
def stale_lookup(monkeypatch):
    """Make a module-level lookup miss once, as if another writer had not committed yet."""

    def _patch(module, name: str, stale_value=None) -> None:
        real = getattr(module, name)
        calls = {"count": 0}

        def _lookup(*args, **kwargs):
            calls["count"] += 1
            if calls["count"] == 1:
                return stale_value
            return real(*args, **kwargs)

        monkeypatch.setattr(module, name, _lookup)

    return _patch
