"""Error taxonomy for queue operations."""

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    """Broad category of a failed queue operation."""

    VALIDATION = "validation"
    ADMISSION_DENIED = "admission_denied"
    OWNERSHIP = "ownership"
    STATE = "state"
    LIMIT_EXCEEDED = "limit_exceeded"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    STORAGE = "storage"


class ErrorReason(StrEnum):
    """Specific reason within an error kind."""

    EMPTY_INPUT = "empty_input"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    INVALID_CHARACTERS = "invalid_characters"
    OUT_OF_RANGE = "out_of_range"
    UNKNOWN_FLOOR = "unknown_floor"
    PAST = "past"
    TOMORROW_LOCKED = "tomorrow_locked"
    TOO_FAR_FUTURE = "too_far_future"
    NOT_OWNER = "not_owner"
    FROZEN_BY_SKIP = "frozen_by_skip"
    INVALID_TARGET = "invalid_target"


@dataclass(frozen=True)
class QueueError:
    """Failure returned to the caller instead of being raised."""

    kind: ErrorKind
    message: str
    reason: ErrorReason | None = None


class QueueStorageError(Exception):
    """Base class for failures reported by a queue repository."""


class StorageError(QueueStorageError):
    """The storage backend could not complete the request."""


class EntryNotFoundError(QueueStorageError):
    """No row matched the id (and session guard, when given)."""

    def __init__(self, entry_id: object) -> None:
        self.entry_id = entry_id
        super().__init__(f"Queue entry {entry_id} not found")


class NumberConflictError(QueueStorageError):
    """Another entry already holds this number in the partition."""
