"""Date utility functions for MCP Server for macOS reminders.

The gateway wire format always carries UTC ISO 8601 timestamps, while
callers may send date-only strings for all-day due dates or timestamps
without an offset, which are read in the local time zone.
"""

import re
from datetime import date, datetime, time, timezone
from typing import Any

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_date_only(value: Any) -> bool:
    """Whether ``value`` is a ``YYYY-MM-DD`` string."""
    return isinstance(value, str) and bool(_DATE_ONLY.match(value.strip()))


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a wire timestamp into an aware UTC datetime.

    Missing or unparseable values yield None rather than a default.
    Naive values are taken as UTC since the gateway always writes UTC.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_all_day(value: Any) -> date | None:
    """Parse a wire all-day due date.

    Accepts ``YYYY-MM-DD`` as well as a full timestamp marking the start of
    the day, which is converted to the local calendar date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.astimezone().date() if value.tzinfo else value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if is_date_only(text):
        try:
            return date.fromisoformat(text)
        except ValueError:
            return None

    instant = parse_timestamp(text)
    if instant is None:
        return None
    return instant.astimezone().date()


def format_timestamp(value: datetime | None) -> str | None:
    """Format a datetime as a UTC ISO 8601 string with milliseconds."""
    if value is None:
        return None
    return (
        value.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def local_midnight(day: date) -> datetime:
    """Start of ``day`` in the local time zone, as an aware UTC datetime."""
    return datetime.combine(day, time()).astimezone(timezone.utc)


def parse_due_input(value: Any) -> datetime:
    """Parse a caller-supplied timed date.

    Timestamps without an offset are interpreted in the local time zone.

    Raises:
        ValueError: If the value is not an ISO 8601 date-time
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise ValueError(f"Invalid ISO 8601 date: {value}") from e
    else:
        raise ValueError(f"Invalid ISO 8601 date: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed.astimezone(timezone.utc)


def parse_all_day_input(value: Any) -> date:
    """Parse a caller-supplied all-day date.

    Raises:
        ValueError: If the value is not a ``YYYY-MM-DD`` date
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if is_date_only(value):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValueError(
        f"Invalid all-day date format (expected YYYY-MM-DD): {value}"
    )
