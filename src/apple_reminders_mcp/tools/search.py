"""MCP tools for searching reminders."""

from ..client import GatewayClient
from ..constants import DEFAULT_PAGINATION_LIMIT, DEFAULT_PAGINATION_OFFSET
from ..models import (
    ListRemindersInput,
    ReminderPage,
    SearchRemindersInput,
    validate_input,
)
from ..normalizer import normalize_reminder
from ..query import build_page, filter_reminders, paginate, sort_reminders
from ..query import search_reminders as match_name


async def search_reminders(
    query: str,
    list_name: str | None = None,
    completed: bool | None = None,
    has_due_date: bool | None = None,
    limit: int = DEFAULT_PAGINATION_LIMIT,
    offset: int = DEFAULT_PAGINATION_OFFSET,
) -> ReminderPage:
    """Search reminders by name.

    Matches reminders whose name contains the query string
    (case-insensitive).

    Args:
        query: The text to search for in reminder names.
        list_name: Limit search to a specific list (optional).
        completed: True for completed only, False for incomplete only
            (optional, default both).
        has_due_date: True for reminders with a due date only, False for
            reminders without one (optional).
        limit: Maximum number of results to return (1-200, default 50).
        offset: Number of results to skip for pagination (default 0).

    Returns:
        One page of matching reminders, in the same order as list_reminders.

    Note:
        EventKit has no name search, so this fetches every reminder
        matching the list/completion filters and matches names in Python.
        For large datasets, consider using list_name to narrow the scope.
    """
    params = validate_input(
        SearchRemindersInput,
        {
            "query": query,
            "list_name": list_name,
            "completed": completed,
            "has_due_date": has_due_date,
            "limit": limit,
            "offset": offset,
        },
    )

    fetch = ListRemindersInput(list_name=params.list_name, completed=params.completed)
    result = await GatewayClient.get_instance().call("listReminders", fetch)
    reminders = [normalize_reminder(record) for record in result["reminders"]]

    matching = sort_reminders(
        filter_reminders(
            match_name(reminders, params.query), has_due_date=params.has_due_date
        )
    )
    page = paginate(matching, params.offset, limit)
    return build_page(page, len(matching), params.offset, limit, query=params.query)


__all__ = ["search_reminders"]
