"""Domain models for the laundry queue."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID


class EntryStatus(StrEnum):
    """Stored and derived statuses of a queue entry."""

    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    SKIPPED = "skipped"


WRITABLE_STATUSES = frozenset(
    {EntryStatus.WAITING, EntryStatus.IN_PROGRESS, EntryStatus.FINISHED}
)


@dataclass(frozen=True)
class NewQueueEntry:
    """Entry payload before the repository assigns an id."""

    telegram_tag: str
    room: str
    floor: int
    queue_date: date
    number: int
    status: EntryStatus
    session_id: str | None
    created_at: datetime | None = None


@dataclass(frozen=True)
class QueueEntry:
    """A single sign-up in a floor's queue for one day."""

    id: UUID
    telegram_tag: str
    room: str
    floor: int
    queue_date: date
    number: int
    status: EntryStatus
    session_id: str | None
    created_at: datetime


@dataclass(frozen=True)
class QueueRow:
    """Entry paired with the status shown to users."""

    entry: QueueEntry
    effective_status: EntryStatus


@dataclass(frozen=True)
class QueueWindow:
    """Entries of one floor for the anchor day and the two days before it."""

    today: list[QueueRow]
    yesterday: list[QueueRow]
    day_before: list[QueueRow]
