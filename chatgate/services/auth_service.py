"""Bearer-token authentication against identities issued by the account service."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Final, Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_session
from ..models import User
from .errors import Unauthenticated

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)

_PLACEHOLDER_SECRETS: Final[set[str]] = {
    "changeme",
    "change-me",
    "placeholder",
    "example",
    "secret",
}


def _get_jwt_secret() -> str:
    value = (get_settings().jwt_secret_key or "").strip()
    if not value or value.lower() in _PLACEHOLDER_SECRETS:
        raise RuntimeError("Environment variable JWT_SECRET_KEY is required and must not use placeholder defaults")
    return value


def create_access_token(subject: UUID, *, expires_minutes: Optional[int] = None) -> str:
    """Create a signed JWT holding the provided ``subject``."""

    settings = get_settings()
    expire_delta = timedelta(minutes=expires_minutes or settings.jwt_expires_minutes)
    now = datetime.now(timezone.utc)
    payload = {"sub": str(subject), "exp": now + expire_delta, "iat": now}
    return jwt.encode(payload, _get_jwt_secret(), algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID:
    """Decode and validate a JWT, returning the embedded subject UUID."""

    try:
        payload = jwt.decode(token, _get_jwt_secret(), algorithms=[get_settings().jwt_algorithm])
    except JWTError as exc:
        raise Unauthenticated("Invalid token") from exc

    subject = payload.get("sub")
    if not subject:
        raise Unauthenticated("Invalid token payload")
    try:
        return UUID(subject)
    except ValueError as exc:
        raise Unauthenticated("Invalid token payload") from exc


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
    db: Session = Depends(get_session),
) -> User:
    """Resolve the authenticated user from the provided bearer token."""

    if not credentials or credentials.scheme.lower() != "bearer":
        raise Unauthenticated("Missing bearer token")

    user_id = decode_access_token(credentials.credentials)
    user = db.get(User, user_id)
    if user is None:
        logger.warning("Token subject %s has no matching user", user_id)
        raise Unauthenticated("Invalid token")
    return user


__all__ = ["create_access_token", "decode_access_token", "get_current_user"]
