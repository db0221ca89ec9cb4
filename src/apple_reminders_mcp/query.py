"""Filtering, ordering and pagination over canonical reminders."""

from collections.abc import Iterable, Sequence
from typing import TypeVar

from .constants import DEFAULT_PAGINATION_LIMIT, DEFAULT_PAGINATION_OFFSET
from .models import Reminder, ReminderPage

T = TypeVar("T")


def filter_reminders(
    reminders: Iterable[Reminder],
    completed: bool | None = None,
    has_due_date: bool | None = None,
) -> list[Reminder]:
    """Keep reminders matching the completion and due-date filters.

    A filter left as None places no restriction.
    """
    result = []
    for reminder in reminders:
        if completed is not None and reminder.completed != completed:
            continue
        if has_due_date is not None and (reminder.due_timestamp is not None) != has_due_date:
            continue
        result.append(reminder)
    return result


def sort_key(reminder: Reminder) -> tuple[int, float, float, str, str]:
    """Canonical ordering key.

    1. Reminders with a due date come first, earliest due first.
    2. Ties break by most recently modified, using the creation date when
       no modification date is known.
    3. Remaining ties break by case-insensitive name, then identifier.
    """
    due = reminder.due_timestamp
    touched = reminder.recency_date
    return (
        0 if due is not None else 1,
        due.timestamp() if due is not None else 0.0,
        -touched.timestamp(),
        reminder.name.casefold(),
        reminder.id,
    )


def sort_reminders(reminders: Iterable[Reminder]) -> list[Reminder]:
    """Sort reminders into canonical order."""
    return sorted(reminders, key=sort_key)


def paginate(
    items: Sequence[T],
    offset: int = DEFAULT_PAGINATION_OFFSET,
    limit: int | None = DEFAULT_PAGINATION_LIMIT,
) -> list[T]:
    """Slice one page out of ``items``; a None limit takes all remaining."""
    start = max(offset, 0)
    if limit is None:
        return list(items[start:])
    return list(items[start : start + max(limit, 1)])


def build_page(
    reminders: list[Reminder],
    total: int,
    offset: int = DEFAULT_PAGINATION_OFFSET,
    limit: int = DEFAULT_PAGINATION_LIMIT,
    query: str | None = None,
) -> ReminderPage:
    """Wrap an already-sliced page with its pagination metadata."""
    has_more = offset + limit < total
    return ReminderPage(
        total=total,
        count=len(reminders),
        offset=offset,
        limit=limit,
        has_more=has_more,
        next_offset=offset + limit if has_more else None,
        query=query,
        reminders=reminders,
    )


def search_reminders(reminders: Iterable[Reminder], query: str) -> list[Reminder]:
    """Case-insensitive substring match of ``query`` against names."""
    needle = query.casefold()
    return [r for r in reminders if needle in r.name.casefold()]


def find_by_name(reminders: Iterable[Reminder], name: str) -> Reminder | None:
    """First reminder named exactly ``name`` under canonical order.

    Names are not unique within a list; this resolution rule is the one
    callers can rely on.
    """
    for reminder in sort_reminders(reminders):
        if reminder.name == name:
            return reminder
    return None
