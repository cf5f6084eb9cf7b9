"""Normalization and validation of user-supplied sign-up fields."""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from laundry_queue.domain.errors import ErrorReason

HANDLE_MIN_LENGTH = 5
HANDLE_MAX_LENGTH = 32
FLAT_ROOM_MIN = 1
FLAT_ROOM_MAX = 1050

_HANDLE_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
_ROOM_PATTERN = re.compile(r"^[+-]?[0-9]+$")


class RoomPolicy(StrEnum):
    """Which room numbers are accepted."""

    FLAT = "flat"
    DORMITORY = "dormitory"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a single input field."""

    valid: bool
    value: str
    error: ErrorReason | None = None
    message: str | None = None


def _dormitory_ranges() -> list[tuple[int, int]]:
    ranges: list[tuple[int, int]] = []
    for floor in range(2, 10):
        base = floor * 100
        ranges.extend(
            [(base + 1, base + 6), (base + 9, base + 24), (base + 29, base + 35)]
        )
    ranges.extend([(1001, 1006), (1009, 1017)])
    return ranges


_DORMITORY_RANGES = _dormitory_ranges()


def validate_handle(raw: str | None) -> ValidationResult:
    """Validate a Telegram handle, accepting it with or without a leading @."""
    trimmed = (raw or "").strip()
    value = trimmed[1:] if trimmed.startswith("@") else trimmed

    if not value:
        return _invalid(value, ErrorReason.EMPTY_INPUT, "Enter a Telegram handle")
    if len(value) < HANDLE_MIN_LENGTH:
        return _invalid(
            value,
            ErrorReason.TOO_SHORT,
            f"Handle must be at least {HANDLE_MIN_LENGTH} characters",
        )
    if len(value) > HANDLE_MAX_LENGTH:
        return _invalid(
            value,
            ErrorReason.TOO_LONG,
            f"Handle must be at most {HANDLE_MAX_LENGTH} characters",
        )
    if not _HANDLE_PATTERN.match(value):
        return _invalid(
            value,
            ErrorReason.INVALID_CHARACTERS,
            "Only Latin letters, digits and _ are allowed",
        )
    return ValidationResult(valid=True, value=value.lower())


def validate_room(
    raw: str | None, policy: RoomPolicy = RoomPolicy.FLAT
) -> ValidationResult:
    """Validate a room number against the configured room policy."""
    value = (raw or "").strip()
    if not value or not _ROOM_PATTERN.match(value):
        return _invalid(value, ErrorReason.EMPTY_INPUT, "Enter a room number")

    number = int(value)
    if not is_valid_room_number(number, policy):
        return _invalid(value, ErrorReason.OUT_OF_RANGE, "Enter a valid room number")
    return ValidationResult(valid=True, value=str(number))


def is_valid_room_number(number: int, policy: RoomPolicy) -> bool:
    """Return whether a room number exists under the given policy."""
    if policy is RoomPolicy.DORMITORY:
        return any(low <= number <= high for low, high in _DORMITORY_RANGES)
    return FLAT_ROOM_MIN <= number <= FLAT_ROOM_MAX


def validate_floor(floor: int, floors: Iterable[int]) -> ValidationResult:
    """Check that a floor has a laundry queue."""
    if floor not in set(floors):
        return _invalid(
            str(floor), ErrorReason.UNKNOWN_FLOOR, f"Floor {floor} has no queue"
        )
    return ValidationResult(valid=True, value=str(floor))


def _invalid(value: str, reason: ErrorReason, message: str) -> ValidationResult:
    return ValidationResult(valid=False, value=value, error=reason, message=message)
