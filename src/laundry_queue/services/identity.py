"""Opaque per-device session tokens."""

from uuid import uuid4

SESSION_COOKIE_NAME = "queue_session_id"


def ensure_session_id(existing: str | None) -> str:
    """Return the stored session token, creating a new one if none exists."""
    if existing and existing.strip():
        return existing.strip()
    return uuid4().hex
