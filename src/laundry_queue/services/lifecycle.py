"""Entry lifecycle rules: staleness, ownership and status transitions."""

from datetime import datetime, timedelta

from laundry_queue.domain.errors import ErrorKind, ErrorReason, QueueError
from laundry_queue.domain.queue import WRITABLE_STATUSES, EntryStatus, QueueEntry

DEFAULT_STALE_AFTER = timedelta(hours=12)


def effective_status(
    entry: QueueEntry, now: datetime, stale_after: timedelta = DEFAULT_STALE_AFTER
) -> EntryStatus:
    """Return the status shown for an entry, applying the staleness rule."""
    if now - entry.created_at >= stale_after:
        return EntryStatus.SKIPPED
    return entry.status


def check_status_change(  # noqa: PLR0913
    entry: QueueEntry,
    new_status: str,
    requester_session_id: str | None,
    now: datetime,
    *,
    admin: bool = False,
    stale_after: timedelta = DEFAULT_STALE_AFTER,
) -> QueueError | None:
    """Return why a status change is not allowed, or None if it is."""
    denied = _check_access(entry, requester_session_id, now, admin, stale_after)
    if denied:
        return denied
    if new_status not in WRITABLE_STATUSES:
        return QueueError(
            kind=ErrorKind.STATE,
            reason=ErrorReason.INVALID_TARGET,
            message=f"Status {new_status!r} cannot be set",
        )
    return None


def check_removal(
    entry: QueueEntry,
    requester_session_id: str | None,
    now: datetime,
    *,
    admin: bool = False,
    stale_after: timedelta = DEFAULT_STALE_AFTER,
) -> QueueError | None:
    """Return why an entry cannot be removed, or None if it can."""
    return _check_access(entry, requester_session_id, now, admin, stale_after)


def _check_access(
    entry: QueueEntry,
    requester_session_id: str | None,
    now: datetime,
    admin: bool,
    stale_after: timedelta,
) -> QueueError | None:
    # Admins bypass both ownership and the staleness freeze.
    if admin:
        return None
    if entry.session_id is None or requester_session_id != entry.session_id:
        return QueueError(
            kind=ErrorKind.OWNERSHIP,
            reason=ErrorReason.NOT_OWNER,
            message="Only the person who signed up can change this entry",
        )
    if effective_status(entry, now, stale_after) is EntryStatus.SKIPPED:
        return QueueError(
            kind=ErrorKind.STATE,
            reason=ErrorReason.FROZEN_BY_SKIP,
            message="Entry was skipped and can no longer be changed",
        )
    return None
