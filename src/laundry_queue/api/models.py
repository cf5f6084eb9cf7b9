"""Pydantic models for queue API payloads."""

from datetime import date

from pydantic import BaseModel


class EntryCreate(BaseModel):
    """Sign-up form submitted by a resident."""

    floor: int
    telegram_tag: str
    room: str
    queue_date: date | None = None


class AdminEntryCreate(EntryCreate):
    """Entry added from the admin view with an explicit status."""

    status: str = "waiting"


class StatusUpdate(BaseModel):
    """Requested status for an entry."""

    status: str
