"""Sequence numbers within a (date, floor) partition."""

from collections.abc import Iterable


def next_number(existing: Iterable[int]) -> int:
    """Return the number for the next sign-up in a partition.

    Numbers are display labels: gaps left by deletions are never reused.
    """
    return max(existing, default=0) + 1
