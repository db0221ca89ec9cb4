"""MCP tools for reminder list management."""

from ..client import GatewayClient
from ..models import CreateListInput, DeleteListInput, ReminderList, validate_input
from ..normalizer import normalize_list


async def list_reminder_lists() -> dict[str, list[ReminderList]]:
    """Get all reminder lists.

    Returns the identifier and name of every list in the user's
    Reminders app.
    """
    records = await GatewayClient.get_instance().call("listLists")
    # Wrap in dict to ensure FastMCP always returns a TextContent
    # (empty lists cause "No result received" in Claude Desktop)
    return {"lists": [normalize_list(record) for record in records]}


async def create_reminder_list(name: str) -> ReminderList:
    """Create a new reminder list.

    Args:
        name: The name for the new list. Must not match an existing list.

    Returns:
        The newly created reminder list.

    Raises:
        ValidationError: If a list with this name already exists.
    """
    params = validate_input(CreateListInput, {"name": name})
    result = await GatewayClient.get_instance().call("createList", params)
    return ReminderList(id=result["id"], name=params.name)


async def delete_reminder_list(name: str) -> bool:
    """Delete a reminder list.

    Warning: This will also delete all reminders in the list.

    Args:
        name: The exact name of the list to delete.

    Returns:
        True if the list was successfully deleted.

    Raises:
        NotFoundError: If no list exists with the given name.
    """
    params = validate_input(DeleteListInput, {"name": name})
    result = await GatewayClient.get_instance().call("deleteList", params)
    return bool(result["success"])


__all__ = [
    "list_reminder_lists",
    "create_reminder_list",
    "delete_reminder_list",
]
