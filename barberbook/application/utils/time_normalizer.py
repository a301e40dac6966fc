from __future__ import annotations

import re
from datetime import date, datetime, timezone

DATE_PATTERN = re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})$")
TIME_PATTERN = re.compile(r"^(\d{1,2})(?::(\d{2}))?(?::(\d{2}))?\s*(am|pm)?$")


def normalize(date_str: str | None, time_str: str | None) -> datetime | None:
    """
    Merge a calendar date and a clock time into one UTC instant.

    Returns None if either part is missing or unparseable. The result never
    depends on the local wall clock: the same inputs always give the same instant.
    """
    if not date_str or not date_str.strip() or not time_str or not time_str.strip():
        return None

    parsed_date = _parse_date(date_str)
    parsed_time = _parse_time(time_str)
    if parsed_date is None or parsed_time is None:
        return None

    hour, minute = parsed_time
    return datetime(
        parsed_date.year,
        parsed_date.month,
        parsed_date.day,
        hour,
        minute,
        tzinfo=timezone.utc,
    )


def to_wire(instant: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    utc = instant.astimezone(timezone.utc) if instant.tzinfo else instant.replace(tzinfo=timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_wire(value: str) -> datetime:
    """Parse a ledger timestamp. Naive timestamps are taken as UTC."""
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_date(text: str) -> date | None:
    match = DATE_PATTERN.match(text.strip())
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def _parse_time(text: str) -> tuple[int, int] | None:
    """Parse 'HH:MM', 'HH:MM:SS', '9:30 am' or '2pm'. Seconds are dropped."""
    match = TIME_PATTERN.match(text.strip().lower())
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2)) if match.group(2) else 0
    if match.group(3) and int(match.group(3)) > 59:
        return None
    am_pm = match.group(4)

    # A bare hour is only a time when it carries am/pm.
    if match.group(2) is None and am_pm is None:
        return None

    if am_pm:
        if not 1 <= hour <= 12:
            return None
        if am_pm == "pm" and hour != 12:
            hour += 12
        elif am_pm == "am" and hour == 12:
            hour = 0

    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return (hour, minute)
    return None
