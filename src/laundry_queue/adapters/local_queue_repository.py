"""JSON-file queue repository used when Supabase is not configured."""

import json
import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from pathlib import Path
from uuid import UUID, uuid4

from laundry_queue.adapters.queue_rows import (
    entry_from_row,
    is_valid_row,
    row_from_new_entry,
)
from laundry_queue.domain.errors import (
    EntryNotFoundError,
    NumberConflictError,
    StorageError,
)
from laundry_queue.domain.queue import EntryStatus, NewQueueEntry, QueueEntry
from laundry_queue.services.queue import QueueRepository

_logger = logging.getLogger(__name__)


@dataclass
class LocalQueueRepository(QueueRepository):
    """Stores queue rows in a local JSON file, or only in memory without a path."""

    path: Path | None = None
    _rows: list[dict[str, object]] = field(
        default_factory=list, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.path is not None:
            self._rows = self._read()

    def list_entries(
        self,
        queue_dates: list[date] | None = None,
        floor: int | None = None,
        session_id: str | None = None,
        order_by: str = "created_at",
        descending: bool = False,
    ) -> list[QueueEntry]:
        """Return entries matching every given filter."""
        wanted = {day.isoformat() for day in queue_dates} if queue_dates else None
        entries = [
            entry_from_row(row)
            for row in self._rows
            if (wanted is None or row["queue_date"] in wanted)
            and (floor is None or row["floor"] == floor)
            and (session_id is None or row.get("session_id") == session_id)
        ]
        return sorted(
            entries, key=lambda entry: getattr(entry, order_by), reverse=descending
        )

    def get_entry(self, entry_id: UUID) -> QueueEntry | None:
        """Return an entry by id, if present."""
        row = self._find(entry_id, None)
        return entry_from_row(row) if row else None

    def insert_entry(self, entry: NewQueueEntry) -> QueueEntry:
        """Append a row, rejecting a number already used in the partition."""
        row = row_from_new_entry(entry)
        for existing in self._rows:
            if (
                existing["queue_date"] == row["queue_date"]
                and existing["floor"] == row["floor"]
                and existing["number"] == row["number"]
            ):
                raise NumberConflictError(
                    f"Number {entry.number} is taken on floor {entry.floor}"
                )
        row["id"] = str(uuid4())
        row.setdefault("created_at", datetime.now(tz=UTC).isoformat())
        self._rows.append(row)
        try:
            self._write()
        except StorageError:
            self._rows.remove(row)
            raise
        return entry_from_row(row)

    def update_status(
        self, entry_id: UUID, status: EntryStatus, session_id: str | None = None
    ) -> None:
        """Update an entry's status, only for the owning session when given."""
        row = self._find(entry_id, session_id)
        if row is None:
            raise EntryNotFoundError(entry_id)
        previous = row["status"]
        row["status"] = str(status)
        try:
            self._write()
        except StorageError:
            row["status"] = previous
            raise

    def delete_entry(self, entry_id: UUID, session_id: str | None = None) -> None:
        """Delete an entry, only for the owning session when given."""
        row = self._find(entry_id, session_id)
        if row is None:
            raise EntryNotFoundError(entry_id)
        index = self._rows.index(row)
        del self._rows[index]
        try:
            self._write()
        except StorageError:
            self._rows.insert(index, row)
            raise

    def _find(
        self, entry_id: UUID, session_id: str | None
    ) -> dict[str, object] | None:
        for row in self._rows:
            if row["id"] != str(entry_id):
                continue
            if session_id is not None and row.get("session_id") != session_id:
                return None
            return row
        return None

    def _read(self) -> list[dict[str, object]]:
        if self.path is None or not self.path.exists():
            return []
        try:
            rows = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            _logger.warning("Ignoring unreadable queue store at %s", self.path)
            return []
        except OSError as exc:
            raise StorageError(f"Failed to read queue store: {exc}") from exc
        if not isinstance(rows, list):
            _logger.warning("Ignoring queue store without a row list at %s", self.path)
            return []
        valid = [row for row in rows if is_valid_row(row)]
        if len(valid) != len(rows):
            _logger.warning(
                "Dropped %s malformed rows from queue store at %s",
                len(rows) - len(valid),
                self.path,
            )
        return valid

    def _write(self) -> None:
        if self.path is None:
            return
        try:
            self.path.write_text(json.dumps(self._rows, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to write queue store: {exc}") from exc
