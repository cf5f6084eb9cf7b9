"""Serialization of queue results into HTTP responses."""

from typing import TypeVar

from fastapi import HTTPException

from laundry_queue.domain.errors import ErrorKind, QueueError
from laundry_queue.domain.queue import QueueEntry, QueueRow
from laundry_queue.services.queue import Result

T = TypeVar("T")

_STATUS_CODES = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.ADMISSION_DENIED: 422,
    ErrorKind.OWNERSHIP: 403,
    ErrorKind.STATE: 409,
    ErrorKind.LIMIT_EXCEEDED: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.STORAGE: 503,
}


def unwrap(result: Result[T]) -> T:
    """Return the result value or raise the matching HTTP error."""
    if result.error is not None:
        raise _http_error(result.error)
    return result.value


def _http_error(error: QueueError) -> HTTPException:
    return HTTPException(
        status_code=_STATUS_CODES[error.kind],
        detail={
            "error": str(error.kind),
            "reason": str(error.reason) if error.reason else None,
            "message": error.message,
        },
    )


def serialize_entry(entry: QueueEntry) -> dict[str, object]:
    """Return the public fields of an entry."""
    return {
        "id": str(entry.id),
        "telegram_tag": entry.telegram_tag,
        "room": entry.room,
        "floor": entry.floor,
        "queue_date": entry.queue_date.isoformat(),
        "number": entry.number,
        "status": str(entry.status),
        "created_at": entry.created_at.isoformat(),
    }


def serialize_row(row: QueueRow, session_id: str | None = None) -> dict[str, object]:
    """Return an entry as shown in a listing, with its effective status."""
    payload = serialize_entry(row.entry)
    payload["stored_status"] = payload["status"]
    payload["status"] = str(row.effective_status)
    if session_id is not None:
        payload["is_mine"] = row.entry.session_id == session_id
    return payload
