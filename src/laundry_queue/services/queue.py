"""Queue orchestration: sign-ups, status changes and listings."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from enum import StrEnum
from typing import Generic, Protocol, TypeVar
from uuid import UUID
from zoneinfo import ZoneInfo

from laundry_queue.domain.errors import (
    EntryNotFoundError,
    ErrorKind,
    ErrorReason,
    NumberConflictError,
    QueueError,
    StorageError,
)
from laundry_queue.domain.queue import (
    WRITABLE_STATUSES,
    EntryStatus,
    NewQueueEntry,
    QueueEntry,
    QueueRow,
    QueueWindow,
)
from laundry_queue.services.admission import DEFAULT_OPEN_HOUR, can_sign_up
from laundry_queue.services.lifecycle import (
    DEFAULT_STALE_AFTER,
    check_removal,
    check_status_change,
    effective_status,
)
from laundry_queue.services.numbering import next_number
from laundry_queue.services.validation import (
    RoomPolicy,
    ValidationResult,
    validate_floor,
    validate_handle,
    validate_room,
)

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_ADMISSION_MESSAGES = {
    ErrorReason.PAST: "Sign-ups for past days are closed",
    ErrorReason.TOMORROW_LOCKED: "Sign-ups for tomorrow open at {hour}:00",
    ErrorReason.TOO_FAR_FUTURE: "Sign-ups are only open for today and tomorrow",
}


class QueueRepository(Protocol):
    """Persistence interface for queue entries."""

    def list_entries(
        self,
        queue_dates: list[date] | None = None,
        floor: int | None = None,
        session_id: str | None = None,
        order_by: str = "created_at",
        descending: bool = False,
    ) -> list[QueueEntry]:
        """Return entries matching every given filter."""

    def get_entry(self, entry_id: UUID) -> QueueEntry | None:
        """Return an entry by id, if present."""

    def insert_entry(self, entry: NewQueueEntry) -> QueueEntry:
        """Store a new entry and return it with its assigned id."""

    def update_status(
        self, entry_id: UUID, status: EntryStatus, session_id: str | None = None
    ) -> None:
        """Update the status of an entry, guarded by session when given."""

    def delete_entry(self, entry_id: UUID, session_id: str | None = None) -> None:
        """Delete an entry, guarded by session when given."""


class DailyCapScope(StrEnum):
    """Which entries count towards a session's daily limit."""

    DATE = "date"
    FLOOR = "floor"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Value of a queue operation, or the reason it failed."""

    value: T | None = None
    error: QueueError | None = None

    @property
    def ok(self) -> bool:
        """Return whether the operation succeeded."""
        return self.error is None

    @classmethod
    def failure(cls, error: QueueError) -> "Result[T]":
        """Build a failed result."""
        return cls(error=error)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class QueueService:
    """Application service for the laundry queue."""

    repository: QueueRepository
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("Europe/Kyiv"))
    floors: tuple[int, ...] = (4, 6)
    room_policy: RoomPolicy = RoomPolicy.FLAT
    open_hour: int = DEFAULT_OPEN_HOUR
    stale_after: timedelta = DEFAULT_STALE_AFTER
    max_entries_per_day: int = 2
    daily_cap_scope: DailyCapScope = DailyCapScope.DATE
    clock: Callable[[], datetime] = _utc_now

    def now(self) -> datetime:
        """Return the current moment in the dormitory's timezone."""
        return self.clock().astimezone(self.timezone)

    def today(self) -> date:
        """Return the current local calendar date."""
        return self.now().date()

    def list_queue_for_window(
        self, floor: int, anchor_date: date
    ) -> Result[QueueWindow]:
        """Return a floor's entries for the anchor day and the two days before."""
        days = [anchor_date - timedelta(days=offset) for offset in range(3)]
        try:
            entries = self.repository.list_entries(
                queue_dates=days, floor=floor, order_by="created_at", descending=True
            )
        except StorageError as exc:
            return Result.failure(_storage_error(exc))

        entries = sorted(entries, key=lambda entry: entry.created_at, reverse=True)
        now = self.now()
        grouped: dict[date, list[QueueRow]] = {day: [] for day in days}
        for entry in entries:
            if entry.queue_date in grouped:
                grouped[entry.queue_date].append(self._row(entry, now))
        return Result(
            value=QueueWindow(
                today=grouped[days[0]],
                yesterday=grouped[days[1]],
                day_before=grouped[days[2]],
            )
        )

    def list_queue_for_date(
        self, floor: int, queue_date: date
    ) -> Result[list[QueueRow]]:
        """Return a floor's entries for one day ordered by number."""
        try:
            entries = self.repository.list_entries(
                queue_dates=[queue_date], floor=floor, order_by="number"
            )
        except StorageError as exc:
            return Result.failure(_storage_error(exc))
        now = self.now()
        ordered = sorted(entries, key=lambda entry: entry.number)
        return Result(value=[self._row(entry, now) for entry in ordered])

    def add_entry(
        self,
        floor: int,
        queue_date: date,
        handle: str,
        room: str,
        session_id: str,
    ) -> Result[QueueEntry]:
        """Sign a session up for a floor's queue on a given day."""
        fields = self._validate_fields(floor, handle, room)
        if isinstance(fields, QueueError):
            return Result.failure(fields)
        tag, room_number = fields

        now = self.now()
        decision = can_sign_up(queue_date, now, self.open_hour)
        if not decision.allowed:
            template = _ADMISSION_MESSAGES[decision.reason]
            return Result.failure(
                QueueError(
                    kind=ErrorKind.ADMISSION_DENIED,
                    reason=decision.reason,
                    message=template.format(hour=self.open_hour),
                )
            )

        try:
            held = self.repository.list_entries(
                queue_dates=[queue_date],
                floor=floor if self.daily_cap_scope is DailyCapScope.FLOOR else None,
                session_id=session_id,
            )
        except StorageError as exc:
            return Result.failure(_storage_error(exc))
        if len(held) >= self.max_entries_per_day:
            return Result.failure(
                QueueError(
                    kind=ErrorKind.LIMIT_EXCEEDED,
                    message=(
                        f"You can sign up at most {self.max_entries_per_day} "
                        "times per day"
                    ),
                )
            )

        result = self._insert_numbered(
            floor=floor,
            queue_date=queue_date,
            tag=tag,
            room=room_number,
            status=EntryStatus.WAITING,
            session_id=session_id,
            created_at=now,
        )
        if result.ok:
            _logger.info(
                "Queue entry added: floor=%s date=%s number=%s",
                floor,
                queue_date,
                result.value.number,
            )
        return result

    def admin_add_entry(  # noqa: PLR0913
        self,
        floor: int,
        queue_date: date,
        handle: str,
        room: str,
        status: str = EntryStatus.WAITING,
    ) -> Result[QueueEntry]:
        """Add an entry on behalf of a resident, skipping admission rules."""
        fields = self._validate_fields(floor, handle, room)
        if isinstance(fields, QueueError):
            return Result.failure(fields)
        tag, room_number = fields
        if status not in WRITABLE_STATUSES:
            return Result.failure(_invalid_target(status))
        return self._insert_numbered(
            floor=floor,
            queue_date=queue_date,
            tag=tag,
            room=room_number,
            status=EntryStatus(status),
            session_id=None,
            created_at=self.now(),
        )

    def change_status(
        self, entry_id: UUID, new_status: str, session_id: str
    ) -> Result[QueueEntry]:
        """Change the status of an entry owned by the session."""
        return self._change_status(entry_id, new_status, session_id, admin=False)

    def admin_change_status(
        self, entry_id: UUID, new_status: str
    ) -> Result[QueueEntry]:
        """Change the status of any entry."""
        return self._change_status(entry_id, new_status, None, admin=True)

    def remove_entry(self, entry_id: UUID, session_id: str) -> Result[QueueEntry]:
        """Remove an entry owned by the session."""
        return self._remove(entry_id, session_id, admin=False)

    def admin_remove_entry(self, entry_id: UUID) -> Result[QueueEntry]:
        """Remove any entry."""
        return self._remove(entry_id, None, admin=True)

    def _change_status(
        self,
        entry_id: UUID,
        new_status: str,
        session_id: str | None,
        *,
        admin: bool,
    ) -> Result[QueueEntry]:
        loaded = self._load(entry_id)
        if not loaded.ok:
            return loaded
        entry = loaded.value
        denied = check_status_change(
            entry,
            new_status,
            session_id,
            self.now(),
            admin=admin,
            stale_after=self.stale_after,
        )
        if denied:
            return Result.failure(denied)

        status = EntryStatus(new_status)
        try:
            self.repository.update_status(
                entry.id, status, session_id=None if admin else session_id
            )
        except EntryNotFoundError as exc:
            return Result.failure(_not_found(exc))
        except StorageError as exc:
            return Result.failure(_storage_error(exc))
        _logger.info(
            "Queue entry status changed: id=%s status=%s admin=%s",
            entry.id,
            status,
            admin,
        )
        return Result(value=replace(entry, status=status))

    def _remove(
        self, entry_id: UUID, session_id: str | None, *, admin: bool
    ) -> Result[QueueEntry]:
        loaded = self._load(entry_id)
        if not loaded.ok:
            return loaded
        entry = loaded.value
        denied = check_removal(
            entry, session_id, self.now(), admin=admin, stale_after=self.stale_after
        )
        if denied:
            return Result.failure(denied)
        try:
            self.repository.delete_entry(
                entry.id, session_id=None if admin else session_id
            )
        except EntryNotFoundError as exc:
            return Result.failure(_not_found(exc))
        except StorageError as exc:
            return Result.failure(_storage_error(exc))
        _logger.info("Queue entry removed: id=%s admin=%s", entry.id, admin)
        return Result(value=entry)

    def _load(self, entry_id: UUID) -> Result[QueueEntry]:
        try:
            entry = self.repository.get_entry(entry_id)
        except StorageError as exc:
            return Result.failure(_storage_error(exc))
        if entry is None:
            return Result.failure(_not_found(EntryNotFoundError(entry_id)))
        return Result(value=entry)

    def _validate_fields(
        self, floor: int, handle: str, room: str
    ) -> tuple[str, str] | QueueError:
        checks: list[ValidationResult] = [
            validate_floor(floor, self.floors),
            validate_handle(handle),
            validate_room(room, self.room_policy),
        ]
        for check in checks:
            if not check.valid:
                return QueueError(
                    kind=ErrorKind.VALIDATION,
                    reason=check.error,
                    message=check.message or "Invalid input",
                )
        return checks[1].value, checks[2].value

    def _insert_numbered(  # noqa: PLR0913
        self,
        *,
        floor: int,
        queue_date: date,
        tag: str,
        room: str,
        status: EntryStatus,
        session_id: str | None,
        created_at: datetime,
    ) -> Result[QueueEntry]:
        # One retry when a concurrent sign-up took the same number.
        for attempt in range(2):
            try:
                partition = self.repository.list_entries(
                    queue_dates=[queue_date], floor=floor
                )
                entry = self.repository.insert_entry(
                    NewQueueEntry(
                        telegram_tag=tag,
                        room=room,
                        floor=floor,
                        queue_date=queue_date,
                        number=next_number(item.number for item in partition),
                        status=status,
                        session_id=session_id,
                        created_at=created_at,
                    )
                )
            except NumberConflictError:
                _logger.warning(
                    "Queue number conflict: floor=%s date=%s attempt=%s",
                    floor,
                    queue_date,
                    attempt + 1,
                )
                continue
            except StorageError as exc:
                return Result.failure(_storage_error(exc))
            return Result(value=entry)
        return Result.failure(
            QueueError(
                kind=ErrorKind.CONFLICT,
                message="Someone signed up at the same moment, please try again",
            )
        )

    def _row(self, entry: QueueEntry, now: datetime) -> QueueRow:
        return QueueRow(
            entry=entry,
            effective_status=effective_status(entry, now, self.stale_after),
        )


def _invalid_target(status: str) -> QueueError:
    return QueueError(
        kind=ErrorKind.STATE,
        reason=ErrorReason.INVALID_TARGET,
        message=f"Status {status!r} cannot be set",
    )


def _not_found(exc: EntryNotFoundError) -> QueueError:
    return QueueError(kind=ErrorKind.NOT_FOUND, message=str(exc))


def _storage_error(exc: StorageError) -> QueueError:
    _logger.warning("Queue storage failure: %s", exc)
    return QueueError(
        kind=ErrorKind.STORAGE, message="Queue storage is unavailable right now"
    )
