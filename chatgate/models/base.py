"""Utility helpers shared across ORM models."""
from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware "now" used for application-assigned timestamps."""

    return datetime.now(timezone.utc)


__all__ = ["utcnow"]
