"""Supabase-backed queue repository."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from laundry_queue.adapters.queue_rows import (
    QUEUE_COLUMNS,
    entry_from_row,
    row_from_new_entry,
)
from laundry_queue.domain.errors import (
    EntryNotFoundError,
    NumberConflictError,
    StorageError,
)
from laundry_queue.domain.queue import EntryStatus, NewQueueEntry, QueueEntry
from laundry_queue.services.queue import QueueRepository

_TABLE = "queue_entries"
_UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseQueueRepository(QueueRepository):
    """Supabase implementation for queue entries."""

    client: Client

    def list_entries(
        self,
        queue_dates: list[date] | None = None,
        floor: int | None = None,
        session_id: str | None = None,
        order_by: str = "created_at",
        descending: bool = False,
    ) -> list[QueueEntry]:
        """Return entries matching every given filter."""
        query = self.client.table(_TABLE).select(QUEUE_COLUMNS)
        if queue_dates is not None:
            query = query.in_("queue_date", [day.isoformat() for day in queue_dates])
        if floor is not None:
            query = query.eq("floor", floor)
        if session_id is not None:
            query = query.eq("session_id", session_id)
        try:
            response = query.order(order_by, desc=descending).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise StorageError(f"Failed to list queue entries: {exc}") from exc
        return [entry_from_row(row) for row in response.data or []]

    def get_entry(self, entry_id: UUID) -> QueueEntry | None:
        """Return an entry by id, if present."""
        try:
            response = (
                self.client.table(_TABLE)
                .select(QUEUE_COLUMNS)
                .eq("id", str(entry_id))
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise StorageError(f"Failed to load queue entry: {exc}") from exc
        if not response.data:
            return None
        return entry_from_row(response.data[0])

    def insert_entry(self, entry: NewQueueEntry) -> QueueEntry:
        """Insert an entry row and return it."""
        try:
            response = (
                self.client.table(_TABLE).insert(row_from_new_entry(entry)).execute()
            )
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise NumberConflictError(
                    f"Number {entry.number} is taken on floor {entry.floor}"
                ) from exc
            raise StorageError(f"Failed to create queue entry: {exc}") from exc
        except httpx.HTTPError as exc:
            raise StorageError(f"Failed to create queue entry: {exc}") from exc
        if not response.data:
            raise StorageError("Failed to create queue entry")
        return entry_from_row(response.data[0])

    def update_status(
        self, entry_id: UUID, status: EntryStatus, session_id: str | None = None
    ) -> None:
        """Update an entry's status, only for the owning session when given."""
        query = (
            self.client.table(_TABLE)
            .update({"status": str(status)})
            .eq("id", str(entry_id))
        )
        if session_id is not None:
            query = query.eq("session_id", session_id)
        try:
            response = query.execute()
        except (APIError, httpx.HTTPError) as exc:
            raise StorageError(f"Failed to update queue entry: {exc}") from exc
        if not response.data:
            raise EntryNotFoundError(entry_id)

    def delete_entry(self, entry_id: UUID, session_id: str | None = None) -> None:
        """Delete an entry row, only for the owning session when given."""
        query = self.client.table(_TABLE).delete().eq("id", str(entry_id))
        if session_id is not None:
            query = query.eq("session_id", session_id)
        try:
            response = query.execute()
        except (APIError, httpx.HTTPError) as exc:
            raise StorageError(f"Failed to delete queue entry: {exc}") from exc
        if not response.data:
            raise EntryNotFoundError(entry_id)
