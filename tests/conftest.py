"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

import pytest

from laundry_queue.config import Settings
from laundry_queue.containers import AppContainer
from laundry_queue.domain.errors import (
    EntryNotFoundError,
    NumberConflictError,
)
from laundry_queue.domain.queue import EntryStatus, NewQueueEntry, QueueEntry
from laundry_queue.services.queue import QueueRepository, QueueService

KYIV = ZoneInfo("Europe/Kyiv")
TODAY = date(2026, 10, 19)


@dataclass
class FakeClock:
    """Clock returning a settable instant."""

    current: datetime

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


@dataclass
class InMemoryQueueRepository(QueueRepository):
    """In-memory queue repository for tests."""

    entries: dict[UUID, QueueEntry] = field(default_factory=dict)
    conflicts_remaining: int = 0
    fail_with: Exception | None = None
    inserted_numbers: list[int] = field(default_factory=list)

    def list_entries(
        self,
        queue_dates: list[date] | None = None,
        floor: int | None = None,
        session_id: str | None = None,
        order_by: str = "created_at",
        descending: bool = False,
    ) -> list[QueueEntry]:
        self._maybe_fail()
        results = [
            entry
            for entry in self.entries.values()
            if (queue_dates is None or entry.queue_date in queue_dates)
            and (floor is None or entry.floor == floor)
            and (session_id is None or entry.session_id == session_id)
        ]
        return sorted(
            results, key=lambda entry: getattr(entry, order_by), reverse=descending
        )

    def get_entry(self, entry_id: UUID) -> QueueEntry | None:
        self._maybe_fail()
        return self.entries.get(entry_id)

    def insert_entry(self, entry: NewQueueEntry) -> QueueEntry:
        self._maybe_fail()
        self.inserted_numbers.append(entry.number)
        if self.conflicts_remaining > 0:
            self.conflicts_remaining -= 1
            raise NumberConflictError("taken")
        created = QueueEntry(
            id=uuid4(),
            telegram_tag=entry.telegram_tag,
            room=entry.room,
            floor=entry.floor,
            queue_date=entry.queue_date,
            number=entry.number,
            status=entry.status,
            session_id=entry.session_id,
            created_at=entry.created_at or datetime.now(tz=UTC),
        )
        self.entries[created.id] = created
        return created

    def update_status(
        self, entry_id: UUID, status: EntryStatus, session_id: str | None = None
    ) -> None:
        self._maybe_fail()
        entry = self._match(entry_id, session_id)
        self.entries[entry_id] = replace(entry, status=status)

    def delete_entry(self, entry_id: UUID, session_id: str | None = None) -> None:
        self._maybe_fail()
        self._match(entry_id, session_id)
        del self.entries[entry_id]

    def _match(self, entry_id: UUID, session_id: str | None) -> QueueEntry:
        entry = self.entries.get(entry_id)
        if entry is None or (
            session_id is not None and entry.session_id != session_id
        ):
            raise EntryNotFoundError(entry_id)
        return entry

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with


def make_entry(  # noqa: PLR0913
    *,
    number: int = 1,
    floor: int = 4,
    queue_date: date = TODAY,
    status: EntryStatus = EntryStatus.WAITING,
    session_id: str | None = "session-a",
    created_at: datetime | None = None,
    telegram_tag: str = "studenta",
) -> QueueEntry:
    return QueueEntry(
        id=uuid4(),
        telegram_tag=telegram_tag,
        room="205",
        floor=floor,
        queue_date=queue_date,
        number=number,
        status=status,
        session_id=session_id,
        created_at=created_at or datetime(2026, 10, 19, 9, 0, tzinfo=KYIV),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(admin_token="admin-token", local_store_path=None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 19, 10, 0, tzinfo=KYIV))


@pytest.fixture
def queue_repository() -> InMemoryQueueRepository:
    return InMemoryQueueRepository()


@pytest.fixture
def queue_service(
    queue_repository: InMemoryQueueRepository, clock: FakeClock
) -> QueueService:
    return QueueService(repository=queue_repository, timezone=KYIV, clock=clock)


@pytest.fixture
def container(settings: Settings, queue_service: QueueService) -> AppContainer:
    return AppContainer(settings=settings, queue_service=queue_service)

