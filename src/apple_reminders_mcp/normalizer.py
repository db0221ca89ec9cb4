"""Normalization between gateway wire records and canonical models.

The gateway reports every reminder as a flat camelCase record whose dates
are UTC ISO 8601 strings. A due date without a time of day is reported in
``allDayDueDate``; one with a time of day in ``dueDate``.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from .models import Reminder, ReminderList
from .utils import format_timestamp, parse_all_day, parse_timestamp


def normalize_priority(value: Any) -> int:
    """Clamp a wire priority into 0-9; anything non-numeric is 0."""
    if isinstance(value, bool):
        return 0
    try:
        priority = int(value)
    except (TypeError, ValueError):
        return 0
    return min(max(priority, 0), 9)


def normalize_reminder(
    record: Mapping[str, Any], now: datetime | None = None
) -> Reminder:
    """Convert a gateway reminder record into a canonical Reminder.

    Args:
        record: Wire record as decoded from the gateway envelope
        now: Fallback for missing creation/modification dates

    Returns:
        Reminder with exactly one of the due date slots filled, if any
    """
    now = now or datetime.now(timezone.utc)
    modified = parse_timestamp(record.get("modificationDate"))

    all_day = parse_all_day(record.get("allDayDueDate"))
    due = None if all_day is not None else parse_timestamp(record.get("dueDate"))

    reminder = Reminder(
        id=str(record.get("id") or ""),
        name=str(record.get("name") or ""),
        body=record.get("body") or None,
        completed=bool(record.get("completed", False)),
        completion_date=parse_timestamp(record.get("completionDate")),
        due_date=due,
        all_day_due_date=all_day,
        remind_me_date=parse_timestamp(record.get("remindMeDate")),
        priority=normalize_priority(record.get("priority")),
        creation_date=parse_timestamp(record.get("creationDate")) or now,
        modification_date=modified or now,
        list_name=str(record.get("listName") or ""),
    )
    reminder._modification_known = modified is not None
    return reminder


def normalize_list(record: Mapping[str, Any]) -> ReminderList:
    """Convert a gateway list record into a ReminderList."""
    return ReminderList(id=str(record.get("id") or ""), name=str(record.get("name") or ""))


def reminder_to_record(reminder: Reminder) -> dict[str, Any]:
    """Convert a canonical Reminder back into a wire record.

    Absent values, including a modification date the store never
    reported, are left out of the record.
    """
    record: dict[str, Any] = {
        "id": reminder.id,
        "name": reminder.name,
        "body": reminder.body,
        "completed": reminder.completed,
        "completionDate": format_timestamp(reminder.completion_date),
        "dueDate": format_timestamp(reminder.due_date),
        "allDayDueDate": (
            reminder.all_day_due_date.isoformat()
            if reminder.all_day_due_date
            else None
        ),
        "remindMeDate": format_timestamp(reminder.remind_me_date),
        "priority": reminder.priority,
        "creationDate": format_timestamp(reminder.creation_date),
        "modificationDate": (
            format_timestamp(reminder.modification_date)
            if reminder.modification_known
            else None
        ),
        "listName": reminder.list_name,
    }
    return {key: value for key, value in record.items() if value is not None}
