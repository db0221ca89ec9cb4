"""Gateway operations.

Each operation validates its payload with the shared request models,
performs one round trip against the store and returns a JSON-ready
result. Reads normalize the store's records so that filtering, ordering
and pagination follow the same rules on both sides of the process
boundary.
"""

from collections.abc import Callable
from typing import Any, Protocol

from pydantic import BaseModel

from ..exceptions import NotFoundError, ValidationError
from ..models import (
    CreateListInput,
    CreateReminderInput,
    DeleteListInput,
    DeleteReminderInput,
    ListRemindersInput,
    Reminder,
    ReminderFilter,
    UpdateReminderInput,
    validate_input,
)
from ..normalizer import normalize_reminder, reminder_to_record
from ..query import filter_reminders, find_by_name, paginate, sort_reminders


class Store(Protocol):
    """What the operations need from the native reminder store."""

    def list_lists(self) -> list[dict[str, Any]]: ...

    def get_reminder_records(
        self, list_name: str | None = None
    ) -> list[dict[str, Any]]: ...

    def create_reminder(self, params: CreateReminderInput) -> str: ...

    def update_reminder(self, reminder_id: str, params: UpdateReminderInput) -> None: ...

    def delete_reminder(self, reminder_id: str) -> None: ...

    def create_list(self, name: str) -> str: ...

    def delete_list(self, name: str) -> None: ...


def _load(store: Store, filters: ReminderFilter) -> list[Reminder]:
    reminders = [normalize_reminder(r) for r in store.get_reminder_records(filters.list_name)]
    return filter_reminders(reminders, completed=filters.completed)


def _locate(store: Store, list_name: str, reminder_name: str) -> Reminder:
    reminders = [normalize_reminder(r) for r in store.get_reminder_records(list_name)]
    reminder = find_by_name(reminders, reminder_name)
    if reminder is None:
        raise NotFoundError(
            f"Reminder '{reminder_name}' not found in list '{list_name}'"
        )
    return reminder


def list_lists(store: Store, params: None) -> list[dict[str, Any]]:
    return store.list_lists()


def list_reminders(store: Store, params: ListRemindersInput) -> dict[str, Any]:
    reminders = sort_reminders(_load(store, params))
    page = paginate(reminders, params.offset, params.limit)
    return {
        "total": len(reminders),
        "reminders": [reminder_to_record(r) for r in page],
    }


def count_reminders(store: Store, params: ReminderFilter) -> dict[str, Any]:
    return {"count": len(_load(store, params))}


def create_reminder(store: Store, params: CreateReminderInput) -> dict[str, Any]:
    return {"id": store.create_reminder(params)}


def update_reminder(store: Store, params: UpdateReminderInput) -> dict[str, Any]:
    if not params.has_changes():
        raise ValidationError("No updates provided")

    reminder = _locate(store, params.list_name, params.reminder_name)
    store.update_reminder(reminder.id, params)
    return {"success": True}


def delete_reminder(store: Store, params: DeleteReminderInput) -> dict[str, Any]:
    reminder = _locate(store, params.list_name, params.reminder_name)
    store.delete_reminder(reminder.id)
    return {"success": True}


def create_list(store: Store, params: CreateListInput) -> dict[str, Any]:
    if any(record["name"] == params.name for record in store.list_lists()):
        raise ValidationError(f"List '{params.name}' already exists")
    return {"id": store.create_list(params.name)}


def delete_list(store: Store, params: DeleteListInput) -> dict[str, Any]:
    store.delete_list(params.name)
    return {"success": True}


OPERATIONS: dict[str, tuple[type[BaseModel] | None, Callable[[Store, Any], Any]]] = {
    "listLists": (None, list_lists),
    "listReminders": (ListRemindersInput, list_reminders),
    "countReminders": (ReminderFilter, count_reminders),
    "createReminder": (CreateReminderInput, create_reminder),
    "updateReminder": (UpdateReminderInput, update_reminder),
    "deleteReminder": (DeleteReminderInput, delete_reminder),
    "createList": (CreateListInput, create_list),
    "deleteList": (DeleteListInput, delete_list),
}


def run_operation(
    operation: str,
    payload_json: str,
    open_store: Callable[[], Store],
) -> Any:
    """Validate the request, open the store and run one operation.

    The store is only opened, and Reminders access only checked, once the
    operation name and payload are known to be valid.

    Args:
        operation: Operation name
        payload_json: JSON object payload
        open_store: Factory for the store to run against

    Returns:
        JSON-ready operation result

    Raises:
        ValidationError: If the operation or payload is invalid
        RemindersError: Any domain error raised by the operation
    """
    try:
        model, handler = OPERATIONS[operation]
    except KeyError:
        raise ValidationError(f"Unsupported operation: {operation}") from None

    params = validate_input(model, payload_json or "{}") if model else None
    return handler(open_store(), params)
