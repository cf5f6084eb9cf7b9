"""Row mapping shared by the queue repositories."""

from datetime import date, datetime
from uuid import UUID

from laundry_queue.domain.queue import EntryStatus, NewQueueEntry, QueueEntry

QUEUE_COLUMNS = (
    "id, telegram_tag, room, floor, queue_date, number, status, session_id, "
    "created_at"
)

_REQUIRED_KEYS = (
    "id",
    "telegram_tag",
    "room",
    "floor",
    "queue_date",
    "number",
    "status",
    "created_at",
)


def entry_from_row(row: dict[str, object]) -> QueueEntry:
    """Build a queue entry from a stored row."""
    return QueueEntry(
        id=UUID(str(row["id"])),
        telegram_tag=str(row["telegram_tag"]),
        room=str(row["room"]),
        floor=int(row["floor"]),
        queue_date=date.fromisoformat(str(row["queue_date"])),
        number=int(row["number"]),
        status=EntryStatus(row["status"]),
        session_id=str(row["session_id"]) if row.get("session_id") else None,
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )


def row_from_new_entry(entry: NewQueueEntry) -> dict[str, object]:
    """Serialize a new entry for insertion."""
    row: dict[str, object] = {
        "telegram_tag": entry.telegram_tag,
        "room": entry.room,
        "floor": entry.floor,
        "queue_date": entry.queue_date.isoformat(),
        "number": entry.number,
        "status": str(entry.status),
        "session_id": entry.session_id,
    }
    if entry.created_at is not None:
        row["created_at"] = entry.created_at.isoformat()
    return row


def is_valid_row(row: object) -> bool:
    """Return whether a stored row can be read back as an entry."""
    if not isinstance(row, dict):
        return False
    if any(key not in row for key in _REQUIRED_KEYS):
        return False
    try:
        entry_from_row(row)
    except (TypeError, ValueError):
        return False
    return True
