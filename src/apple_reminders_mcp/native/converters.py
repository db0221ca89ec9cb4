"""Converter functions for EventKit <-> gateway wire records."""

from datetime import date, datetime, timezone
from typing import Any

from Foundation import NSCalendar, NSDate, NSDateComponents, NSDateComponentUndefined

from ..utils import format_timestamp

# Date/Time Conversions


def datetime_to_nsdate(dt: datetime) -> NSDate:
    """Convert Python datetime to NSDate."""
    return NSDate.dateWithTimeIntervalSince1970_(dt.timestamp())


def nsdate_to_datetime(nsdate: Any) -> datetime | None:
    """Convert NSDate to an aware UTC datetime."""
    if nsdate is None:
        return None
    return datetime.fromtimestamp(nsdate.timeIntervalSince1970(), tz=timezone.utc)


def datetime_to_components(dt: datetime) -> NSDateComponents:
    """Convert a timed due date to local NSDateComponents."""
    local = dt.astimezone()
    components = NSDateComponents.alloc().init()
    components.setYear_(local.year)
    components.setMonth_(local.month)
    components.setDay_(local.day)
    components.setHour_(local.hour)
    components.setMinute_(local.minute)
    components.setSecond_(local.second)
    return components


def date_to_components(day: date) -> NSDateComponents:
    """Convert an all-day due date to NSDateComponents without a time."""
    components = NSDateComponents.alloc().init()
    components.setYear_(day.year)
    components.setMonth_(day.month)
    components.setDay_(day.day)
    return components


def _is_set(value: Any) -> bool:
    return value is not None and value != NSDateComponentUndefined


def components_to_due(components: Any) -> tuple[datetime | None, date | None]:
    """Split NSDateComponents into (timed due date, all-day due date).

    Components with only year, month and day are an all-day due date; any
    time component makes it a timed one. At most one side is set.
    """
    if components is None:
        return None, None

    year, month, day = components.year(), components.month(), components.day()
    if not (_is_set(year) and _is_set(month) and _is_set(day)):
        return None, None

    time_parts = (components.hour(), components.minute(), components.second())
    if not any(_is_set(part) for part in time_parts):
        return None, date(year, month, day)

    nsdate = NSCalendar.currentCalendar().dateFromComponents_(components)
    return nsdate_to_datetime(nsdate), None


# Priority Conversions
#
# EventKit uses 1 for the highest priority and 9 for the lowest; callers use
# 9 for high. The mapping is its own inverse.


def to_eventkit_priority(priority: int) -> int:
    """Convert a 0-9 caller priority (9 = high) to EKReminder priority."""
    if priority <= 0:
        return 0
    return 10 - min(priority, 9)


def from_eventkit_priority(priority: int) -> int:
    """Convert an EKReminder priority (1 = high) to the 0-9 caller scale."""
    return to_eventkit_priority(priority)


# Alarm Conversions


def earliest_alarm_date(reminder: Any) -> datetime | None:
    """Earliest absolute alarm attached to an EKReminder, if any."""
    alarms = reminder.alarms()
    if not alarms:
        return None

    dates = [
        nsdate_to_datetime(alarm.absoluteDate())
        for alarm in alarms
        if alarm.absoluteDate() is not None
    ]
    return min(dates, default=None)


# EKReminder/EKCalendar -> wire record conversion


def ek_reminder_to_record(reminder: Any) -> dict[str, Any]:
    """Convert EKReminder to a gateway wire record.

    IMPORTANT: Call this INSIDE the fetch completion handler to prevent
    thread-affinity issues with ObjC proxies.

    Args:
        reminder: EKReminder instance

    Returns:
        Dict with camelCase fields and UTC ISO 8601 timestamps
    """
    due, all_day = components_to_due(reminder.dueDateComponents())
    calendar = reminder.calendar()

    record = {
        "id": str(reminder.calendarItemIdentifier()),
        "name": str(reminder.title()) if reminder.title() else "",
        "body": str(reminder.notes()) if reminder.notes() else None,
        "completed": bool(reminder.isCompleted()),
        "completionDate": format_timestamp(nsdate_to_datetime(reminder.completionDate())),
        "dueDate": format_timestamp(due),
        "allDayDueDate": all_day.isoformat() if all_day else None,
        "remindMeDate": format_timestamp(earliest_alarm_date(reminder)),
        "priority": from_eventkit_priority(int(reminder.priority())),
        "creationDate": format_timestamp(nsdate_to_datetime(reminder.creationDate())),
        "modificationDate": format_timestamp(
            nsdate_to_datetime(reminder.lastModifiedDate())
        ),
        "listName": str(calendar.title()) if calendar else "",
    }
    return {key: value for key, value in record.items() if value is not None}


def ek_calendar_to_record(calendar: Any) -> dict[str, Any]:
    """Convert EKCalendar (reminder list) to a gateway wire record."""
    return {
        "id": str(calendar.calendarIdentifier()),
        "name": str(calendar.title()) if calendar.title() else "",
    }
