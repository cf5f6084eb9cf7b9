"""Admission window for new sign-ups."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from laundry_queue.domain.errors import ErrorReason

DEFAULT_OPEN_HOUR = 22


@dataclass(frozen=True)
class AdmissionDecision:
    """Whether a sign-up for a date is allowed right now."""

    allowed: bool
    reason: ErrorReason | None = None


def can_sign_up(
    queue_date: date, now: datetime, open_hour: int = DEFAULT_OPEN_HOUR
) -> AdmissionDecision:
    """Decide whether sign-ups for ``queue_date`` are open at ``now``.

    ``now`` must already be expressed in the dormitory's local time. Today is
    always open, tomorrow opens at ``open_hour`` and anything later is closed.
    """
    today = now.date()
    if queue_date < today:
        return AdmissionDecision(allowed=False, reason=ErrorReason.PAST)
    if queue_date == today:
        return AdmissionDecision(allowed=True)
    if queue_date == today + timedelta(days=1):
        if now.time() >= time(hour=open_hour):
            return AdmissionDecision(allowed=True)
        return AdmissionDecision(allowed=False, reason=ErrorReason.TOMORROW_LOCKED)
    return AdmissionDecision(allowed=False, reason=ErrorReason.TOO_FAR_FUTURE)
