"""MCP tools for reminder CRUD operations."""

import logging

from ..client import GatewayClient
from ..constants import DEFAULT_PAGINATION_LIMIT, DEFAULT_PAGINATION_OFFSET
from ..exceptions import ValidationError
from ..models import (
    CreatedReminder,
    CreateReminderInput,
    DeleteReminderInput,
    ListRemindersInput,
    ReminderFilter,
    ReminderPage,
    UpdateReminderInput,
    validate_input,
)
from ..normalizer import normalize_reminder
from ..query import build_page

logger = logging.getLogger(__name__)


async def list_reminders(
    list_name: str | None = None,
    completed: bool | None = None,
    limit: int = DEFAULT_PAGINATION_LIMIT,
    offset: int = DEFAULT_PAGINATION_OFFSET,
) -> ReminderPage:
    """List reminders with optional filters.

    Reminders with a due date come first, earliest due first; the rest
    follow, most recently modified first.

    Args:
        list_name: Only reminders from this list (optional).
        completed: True for completed only, False for incomplete only
            (optional, default both).
        limit: Maximum number of reminders to return (1-200, default 50).
        offset: Number of reminders to skip for pagination (default 0).

    Returns:
        One page of reminders with the total number of matches.

    Raises:
        NotFoundError: If the specified list doesn't exist.
    """
    params = validate_input(
        ListRemindersInput,
        {"list_name": list_name, "completed": completed, "limit": limit, "offset": offset},
    )
    result = await GatewayClient.get_instance().call("listReminders", params)
    reminders = [normalize_reminder(record) for record in result["reminders"]]
    return build_page(reminders, result["total"], params.offset, limit)


async def count_reminders(
    list_name: str | None = None,
    completed: bool | None = None,
) -> int:
    """Count reminders matching the filters.

    Args:
        list_name: Only count reminders from this list (optional).
        completed: True for completed only, False for incomplete only
            (optional, default both).

    Returns:
        Number of matching reminders.
    """
    params = validate_input(
        ReminderFilter, {"list_name": list_name, "completed": completed}
    )
    result = await GatewayClient.get_instance().call("countReminders", params)
    return int(result["count"])


async def create_reminder(
    name: str,
    list_name: str,
    body: str | None = None,
    due_date: str | None = None,
    all_day_due_date: str | None = None,
    remind_me_date: str | None = None,
    priority: int | None = None,
) -> CreatedReminder:
    """Create a new reminder in an existing list.

    Args:
        name: The title of the reminder.
        list_name: The list to add the reminder to. It must already exist.
        body: Optional notes.
        due_date: Optional ISO 8601 due date and time. A plain "YYYY-MM-DD"
            date creates an all-day reminder.
        all_day_due_date: Optional all-day due date ("YYYY-MM-DD").
        remind_me_date: Optional ISO 8601 time to be notified.
        priority: Optional priority (0=none, 1-4=low, 5-8=medium, 9=high).

    Returns:
        The identifier, name and list of the new reminder.

    Raises:
        NotFoundError: If the list doesn't exist.
        ValidationError: If a field is invalid.
    """
    params = validate_input(
        CreateReminderInput,
        {
            "name": name,
            "list_name": list_name,
            "body": body,
            "due_date": due_date,
            "all_day_due_date": all_day_due_date,
            "remind_me_date": remind_me_date,
            "priority": priority,
        },
    )
    if params.due_date is not None and params.all_day_due_date is not None:
        logger.warning(
            f"Both due forms given for '{params.name}'; the all-day date "
            f"{params.all_day_due_date} takes precedence"
        )

    result = await GatewayClient.get_instance().call("createReminder", params)
    return CreatedReminder(id=result["id"], name=params.name, list_name=params.list_name)


async def update_reminder(
    list_name: str,
    reminder_name: str,
    new_name: str | None = None,
    body: str | None = None,
    due_date: str | None = None,
    all_day_due_date: str | None = None,
    remind_me_date: str | None = None,
    priority: int | None = None,
    completed: bool | None = None,
) -> bool:
    """Update an existing reminder.

    The reminder is located by its exact name within the list. Only
    provided fields are updated; at least one must be given.

    Args:
        list_name: The list containing the reminder.
        reminder_name: The current name of the reminder.
        new_name: New name (optional).
        body: New notes (optional).
        due_date: New ISO 8601 due date and time (optional). A plain
            "YYYY-MM-DD" date makes the reminder all-day.
        all_day_due_date: New all-day due date, "YYYY-MM-DD" (optional).
        remind_me_date: New notification time; replaces existing alarms
            (optional).
        priority: New priority level, 0-9 (optional).
        completed: Mark as complete (True) or incomplete (False) (optional).

    Returns:
        True if the reminder was updated.

    Raises:
        NotFoundError: If the list or reminder doesn't exist.
        ValidationError: If no fields to update are given.
    """
    params = validate_input(
        UpdateReminderInput,
        {
            "list_name": list_name,
            "reminder_name": reminder_name,
            "new_name": new_name,
            "body": body,
            "due_date": due_date,
            "all_day_due_date": all_day_due_date,
            "remind_me_date": remind_me_date,
            "priority": priority,
            "completed": completed,
        },
    )
    if not params.has_changes():
        raise ValidationError("No updates provided")

    result = await GatewayClient.get_instance().call("updateReminder", params)
    return bool(result["success"])


async def delete_reminder(list_name: str, reminder_name: str) -> bool:
    """Delete a reminder.

    Args:
        list_name: The list containing the reminder.
        reminder_name: The exact name of the reminder to delete.

    Returns:
        True if the reminder was deleted.

    Raises:
        NotFoundError: If the list or reminder doesn't exist.
    """
    params = validate_input(
        DeleteReminderInput,
        {"list_name": list_name, "reminder_name": reminder_name},
    )
    result = await GatewayClient.get_instance().call("deleteReminder", params)
    return bool(result["success"])


__all__ = [
    "list_reminders",
    "count_reminders",
    "create_reminder",
    "update_reminder",
    "delete_reminder",
]
