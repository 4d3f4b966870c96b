"""Claim cooldown policy and the wait-time message shown to users."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from .models import ClaimRecord

# At or beyond this many whole hours the wait is shown as a clock time.
ABSOLUTE_THRESHOLD_HOURS = 2


def next_claim_time(record: ClaimRecord, cooldown: timedelta) -> datetime:
    return record.last_claim_time + cooldown


def can_claim(record: ClaimRecord | None, cooldown: timedelta, now: datetime) -> tuple[bool, datetime | None]:
    """Return whether a claim is allowed at ``now`` and when the next one opens."""
    if record is None:
        return True, None
    next_time = next_claim_time(record, cooldown)
    return now >= next_time, next_time


def pluralize(value: int) -> str:
    return "" if value == 1 else "s"


def _split(remaining: timedelta) -> tuple[int, int, int]:
    total = max(int(remaining.total_seconds()), 0)
    return total // 3600, (total // 60) % 60, total % 60


def format_absolute(moment: datetime) -> str:
    moment = moment.astimezone(timezone.utc)
    hour = moment.hour % 12 or 12
    return f"{moment:%b} {moment.day} at {hour}:{moment:%M} {moment:%p} UTC"


def format_wait_time(next_time: datetime, now: datetime) -> str:
    """Render the time left until ``next_time`` for a human reader.

    Two hours or more are shown as an absolute date and time. Shorter waits
    use at most two units, dropping the smaller one when it is zero:
    ``"1 hour and 1 minute"``, ``"1 minute and 30 seconds"``, ``"45 seconds"``.
    """
    hours, minutes, seconds = _split(next_time - now)

    if hours >= ABSOLUTE_THRESHOLD_HOURS:
        return format_absolute(next_time)
    if hours > 0:
        if minutes > 0:
            return f"{hours} hour{pluralize(hours)} and {minutes} minute{pluralize(minutes)}"
        return f"{hours} hour{pluralize(hours)}"
    if minutes > 0:
        if seconds > 0:
            return f"{minutes} minute{pluralize(minutes)} and {seconds} second{pluralize(seconds)}"
        return f"{minutes} minute{pluralize(minutes)}"
    return f"{seconds} second{pluralize(seconds)}"


def cooldown_message(next_time: datetime, now: datetime) -> str:
    wait = format_wait_time(next_time, now)
    hours, _, _ = _split(next_time - now)
    if hours >= ABSOLUTE_THRESHOLD_HOURS:
        return f"Please wait until {wait} before requesting funds again"
    return f"Please wait {wait} before requesting funds again"
