"""MCP tools for macOS Reminders."""

from .lists import create_reminder_list, delete_reminder_list, list_reminder_lists
from .reminders import (
    count_reminders,
    create_reminder,
    delete_reminder,
    list_reminders,
    update_reminder,
)
from .search import search_reminders

__all__ = [
    # List management
    "list_reminder_lists",
    "create_reminder_list",
    "delete_reminder_list",
    # Reminder CRUD
    "list_reminders",
    "count_reminders",
    "create_reminder",
    "update_reminder",
    "delete_reminder",
    # Search
    "search_reminders",
]
