"""Tests for the gateway operations and process entry point."""

import json

import pytest

from apple_reminders_mcp.constants import GATEWAY_OPERATIONS
from apple_reminders_mcp.exceptions import NotFoundError, ValidationError
from apple_reminders_mcp.native import gateway
from apple_reminders_mcp.native.operations import OPERATIONS, run_operation


def _unopened() -> None:
    raise AssertionError("store opened before the request was validated")


def test_every_gateway_operation_is_dispatched():
    assert set(OPERATIONS) == GATEWAY_OPERATIONS


def test_unsupported_operation():
    with pytest.raises(ValidationError, match="Unsupported operation: renameList"):
        run_operation("renameList", "{}", _unopened)


def test_invalid_payload_does_not_open_store():
    with pytest.raises(ValidationError):
        run_operation("createReminder", '{"name": "Milk"}', _unopened)


def test_malformed_json_payload():
    with pytest.raises(ValidationError):
        run_operation("deleteList", "{not json", _unopened)


def test_list_reminders_sorted_with_total(store):
    store.create_list("Work")
    run_operation("createReminder", '{"name": "later", "listName": "Work"}', lambda: store)
    run_operation(
        "createReminder",
        '{"name": "due", "listName": "Work", "dueDate": "2025-03-01T09:00:00Z"}',
        lambda: store,
    )
    run_operation("createReminder", '{"name": "newest", "listName": "Work"}', lambda: store)

    result = run_operation("listReminders", '{"listName": "Work"}', lambda: store)

    assert result["total"] == 3
    assert [r["name"] for r in result["reminders"]] == ["due", "newest", "later"]
    assert result["reminders"][0]["dueDate"] == "2025-03-01T09:00:00.000Z"


def test_list_reminders_page(store):
    store.create_list("Work")
    for i in range(5):
        run_operation(
            "createReminder", json.dumps({"name": f"r{i}", "listName": "Work"}), lambda: store
        )

    result = run_operation(
        "listReminders", '{"listName": "Work", "limit": 2, "offset": 4}', lambda: store
    )

    assert result["total"] == 5
    assert [r["name"] for r in result["reminders"]] == ["r0"]


def test_count_matches_filter(store):
    store.create_list("Work")
    run_operation("createReminder", '{"name": "a", "listName": "Work"}', lambda: store)
    run_operation("createReminder", '{"name": "b", "listName": "Work"}', lambda: store)
    run_operation(
        "updateReminder",
        '{"listName": "Work", "reminderName": "a", "completed": true}',
        lambda: store,
    )

    assert run_operation("countReminders", "{}", lambda: store) == {"count": 2}
    assert run_operation("countReminders", '{"completed": true}', lambda: store) == {
        "count": 1
    }


def test_create_reminder_in_missing_list(store):
    with pytest.raises(NotFoundError, match="List 'Nope' not found"):
        run_operation("createReminder", '{"name": "a", "listName": "Nope"}', lambda: store)

    assert store.lists == {}


def test_update_without_changes(store):
    store.create_list("Work")

    with pytest.raises(ValidationError, match="No updates provided"):
        run_operation(
            "updateReminder", '{"listName": "Work", "reminderName": "a"}', lambda: store
        )


def test_update_missing_reminder(store):
    store.create_list("Work")

    with pytest.raises(NotFoundError, match="Reminder 'a' not found in list 'Work'"):
        run_operation(
            "updateReminder",
            '{"listName": "Work", "reminderName": "a", "priority": 1}',
            lambda: store,
        )


def test_duplicate_list(store):
    store.create_list("Work")

    with pytest.raises(ValidationError, match="List 'Work' already exists"):
        run_operation("createList", '{"name": "Work"}', lambda: store)


def test_list_lists_ignores_payload(store):
    store.create_list("Work")

    assert run_operation("listLists", "", lambda: store) == [
        {"id": store.lists["Work"], "name": "Work"}
    ]


# Process entry point


def _reply(capsys) -> dict:
    return json.loads(capsys.readouterr().out.strip().splitlines()[-1])


def test_main_success(store, capsys, monkeypatch):
    store.create_list("Groceries")
    monkeypatch.setattr(gateway, "open_store", lambda: store)

    gateway.main(["listLists"])

    reply = _reply(capsys)
    assert reply["ok"] is True
    assert reply["result"][0]["name"] == "Groceries"


def test_main_failure_exits_nonzero(store, capsys, monkeypatch):
    monkeypatch.setattr(gateway, "open_store", lambda: store)

    with pytest.raises(SystemExit) as exc_info:
        gateway.main(["deleteList", '{"name": "Nope"}'])

    assert exc_info.value.code == 1
    assert _reply(capsys) == {
        "ok": False,
        "error": "List 'Nope' not found",
        "kind": "not_found",
    }


def test_main_without_operation(capsys):
    with pytest.raises(SystemExit):
        gateway.main([])

    reply = _reply(capsys)
    assert reply["error"] == "Missing operation argument"
    assert reply["kind"] == "validation"


def test_main_default_payload(store, capsys, monkeypatch):
    store.create_list("Work")
    monkeypatch.setattr(gateway, "open_store", lambda: store)

    gateway.main(["countReminders"])

    assert _reply(capsys) == {"ok": True, "result": {"count": 0}}
