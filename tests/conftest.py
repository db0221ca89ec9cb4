"""Pytest configuration and fixtures for MCP Server for macOS reminders tests."""

import itertools
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from apple_reminders_mcp.client import GatewayClient  # noqa: E402
from apple_reminders_mcp.envelope import (  # noqa: E402
    decode_envelope,
    encode_payload,
    error_envelope,
    success_envelope,
)
from apple_reminders_mcp.exceptions import NotFoundError  # noqa: E402
from apple_reminders_mcp.models import (  # noqa: E402
    CreateReminderInput,
    ReminderFields,
    UpdateReminderInput,
)
from apple_reminders_mcp.native.operations import run_operation  # noqa: E402
from apple_reminders_mcp.utils import format_timestamp  # noqa: E402


class FakeStore:
    """In-memory stand-in for the EventKit store, producing wire records.

    Every write advances a fake clock by one minute, so modification dates
    are distinct and increasing.
    """

    def __init__(self) -> None:
        self.lists: dict[str, str] = {}
        self.reminders: dict[str, dict[str, Any]] = {}
        self._ids = itertools.count(1)
        self._clock = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def _tick(self) -> str:
        self._clock += timedelta(minutes=1)
        return format_timestamp(self._clock)

    def _list_or_raise(self, name: str) -> str:
        if name not in self.lists:
            raise NotFoundError(f"List '{name}' not found")
        return self.lists[name]

    def list_lists(self) -> list[dict[str, Any]]:
        return [{"id": list_id, "name": name} for name, list_id in self.lists.items()]

    def create_list(self, name: str) -> str:
        list_id = f"list-{next(self._ids)}"
        self.lists[name] = list_id
        return list_id

    def delete_list(self, name: str) -> None:
        self._list_or_raise(name)
        del self.lists[name]
        self.reminders = {
            rid: record
            for rid, record in self.reminders.items()
            if record["listName"] != name
        }

    def get_reminder_records(self, list_name: str | None = None) -> list[dict[str, Any]]:
        if list_name is not None:
            self._list_or_raise(list_name)
        return [
            dict(record)
            for record in self.reminders.values()
            if list_name is None or record["listName"] == list_name
        ]

    def create_reminder(self, params: CreateReminderInput) -> str:
        self._list_or_raise(params.list_name)
        stamp = self._tick()
        reminder_id = f"reminder-{next(self._ids)}"
        record: dict[str, Any] = {
            "id": reminder_id,
            "name": params.name,
            "completed": False,
            "priority": 0,
            "creationDate": stamp,
            "modificationDate": stamp,
            "listName": params.list_name,
        }
        self._apply(record, params)
        self.reminders[reminder_id] = record
        return reminder_id

    def update_reminder(self, reminder_id: str, params: UpdateReminderInput) -> None:
        record = self.reminders.get(reminder_id)
        if record is None:
            raise NotFoundError(f"Reminder not found: {reminder_id}")

        if params.new_name is not None:
            record["name"] = params.new_name
        self._apply(record, params)
        stamp = self._tick()
        if params.completed is not None:
            record["completed"] = params.completed
            if params.completed:
                record["completionDate"] = stamp
            else:
                record.pop("completionDate", None)
        record["modificationDate"] = stamp

    def delete_reminder(self, reminder_id: str) -> None:
        if self.reminders.pop(reminder_id, None) is None:
            raise NotFoundError(f"Reminder not found: {reminder_id}")

    @staticmethod
    def _apply(record: dict[str, Any], params: ReminderFields) -> None:
        if params.body is not None:
            record["body"] = params.body
        if params.due_date is not None:
            record["dueDate"] = format_timestamp(params.due_date)
            record.pop("allDayDueDate", None)
        if params.all_day_due_date is not None:
            record["allDayDueDate"] = params.all_day_due_date.isoformat()
            record.pop("dueDate", None)
        if params.remind_me_date is not None:
            record["remindMeDate"] = format_timestamp(params.remind_me_date)
        if params.priority is not None:
            record["priority"] = params.priority


class InProcessClient:
    """GatewayClient stand-in that runs operations against a FakeStore.

    Requests and replies still go through the envelope codec, so tools
    see exactly what they would see from the gateway process.
    """

    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.calls: list[str] = []

    async def call(self, operation: str, payload: Any = None) -> Any:
        self.calls.append(operation)
        try:
            result = run_operation(operation, encode_payload(payload), lambda: self.store)
            reply = success_envelope(result)
        except Exception as e:
            reply = error_envelope(e)
        return decode_envelope(reply, operation)


@pytest.fixture
def store() -> FakeStore:
    """Provide an empty in-memory reminder store."""
    return FakeStore()


@pytest.fixture
def gateway(store: FakeStore, monkeypatch: pytest.MonkeyPatch) -> InProcessClient:
    """Route every tool through an in-process gateway over ``store``.

    Args:
        store: The in-memory store fixture
        monkeypatch: Pytest's monkeypatch fixture

    Returns:
        The client installed as the GatewayClient singleton
    """
    client = InProcessClient(store)
    monkeypatch.setattr(GatewayClient, "_instance", client)
    return client


@pytest.fixture
def fake_gateway_package(tmp_path: Path) -> Path:
    """Create a tiny package whose gateway replies according to the operation.

    Args:
        tmp_path: Pytest's temporary path fixture

    Returns:
        Path to the package directory
    """
    package = tmp_path / "fakegw"
    native = package / "native"
    native.mkdir(parents=True)
    (package / "__init__.py").write_text('"""Fake gateway package."""\n')
    (native / "__init__.py").write_text("")
    (native / "gateway.py").write_text(
        '''"""Fake gateway used by the helper and client tests."""

import json
import sys
import time


def main():
    operation = sys.argv[1]
    payload = json.loads(sys.argv[2]) if len(sys.argv) > 2 else {}
    if operation == "listLists":
        print("warming up")
        print(json.dumps({"ok": True, "result": payload}))
    elif operation == "countReminders":
        print(json.dumps({"ok": False, "error": "List 'Nope' not found", "kind": "not_found"}))
        sys.exit(1)
    elif operation == "createList":
        print("boom", file=sys.stderr)
        sys.exit(3)
    elif operation == "deleteList":
        print("not json")
    elif operation == "listReminders":
        time.sleep(30)
'''
    )
    return package
