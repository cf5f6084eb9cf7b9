"""Tests for entry staleness and change permissions."""

from datetime import timedelta

from laundry_queue.domain.errors import ErrorKind, ErrorReason
from laundry_queue.domain.queue import EntryStatus
from laundry_queue.services.lifecycle import (
    check_removal,
    check_status_change,
    effective_status,
)
from tests.conftest import make_entry


def test_effective_status_turns_skipped_after_twelve_hours() -> None:
    entry = make_entry(status=EntryStatus.WAITING)
    created = entry.created_at

    assert (
        effective_status(entry, created + timedelta(hours=11, minutes=59))
        == EntryStatus.WAITING
    )
    assert effective_status(entry, created + timedelta(hours=12)) == (
        EntryStatus.SKIPPED
    )


def test_effective_status_overrides_finished() -> None:
    entry = make_entry(status=EntryStatus.FINISHED)

    assert (
        effective_status(entry, entry.created_at + timedelta(days=1))
        == EntryStatus.SKIPPED
    )


def test_owner_can_change_live_entry() -> None:
    entry = make_entry(session_id="owner")

    assert check_status_change(entry, "in_progress", "owner", entry.created_at) is None


def test_other_session_is_not_owner() -> None:
    entry = make_entry(session_id="owner")

    error = check_status_change(entry, "finished", "intruder", entry.created_at)

    assert error is not None
    assert error.kind == ErrorKind.OWNERSHIP
    assert error.reason == ErrorReason.NOT_OWNER


def test_admin_created_entry_has_no_owner() -> None:
    entry = make_entry(session_id=None)

    error = check_status_change(entry, "finished", None, entry.created_at)

    assert error is not None
    assert error.reason == ErrorReason.NOT_OWNER


def test_stale_entry_is_frozen_for_owner() -> None:
    entry = make_entry(session_id="owner")
    later = entry.created_at + timedelta(hours=13)

    status_error = check_status_change(entry, "finished", "owner", later)
    removal_error = check_removal(entry, "owner", later)

    assert status_error is not None
    assert status_error.reason == ErrorReason.FROZEN_BY_SKIP
    assert removal_error is not None
    assert removal_error.reason == ErrorReason.FROZEN_BY_SKIP


def test_skipped_is_not_a_writable_target() -> None:
    entry = make_entry(session_id="owner")

    error = check_status_change(entry, "skipped", "owner", entry.created_at)

    assert error is not None
    assert error.kind == ErrorKind.STATE
    assert error.reason == ErrorReason.INVALID_TARGET


def test_admin_bypasses_ownership_and_freeze() -> None:
    entry = make_entry(session_id="owner")
    later = entry.created_at + timedelta(hours=20)

    assert check_status_change(entry, "waiting", None, later, admin=True) is None
    assert check_removal(entry, None, later, admin=True) is None


def test_admin_still_cannot_write_skipped() -> None:
    entry = make_entry()

    error = check_status_change(entry, "skipped", None, entry.created_at, admin=True)

    assert error is not None
    assert error.reason == ErrorReason.INVALID_TARGET


def test_custom_stale_window() -> None:
    entry = make_entry()

    assert (
        effective_status(
            entry, entry.created_at + timedelta(hours=2), timedelta(hours=2)
        )
        == EntryStatus.SKIPPED
    )
