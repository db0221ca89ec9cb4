"""Constants for MCP Server for macOS reminders."""

import os
from pathlib import Path

# Timeouts
GATEWAY_TIMEOUT: float = float(os.environ.get("GATEWAY_TIMEOUT", "90.0"))
PERMISSION_TIMEOUT: float = float(os.environ.get("PERMISSION_TIMEOUT", "20.0"))
FETCH_TIMEOUT: float = float(os.environ.get("FETCH_TIMEOUT", "55.0"))

# Pagination defaults
DEFAULT_PAGINATION_LIMIT: int = 50
DEFAULT_PAGINATION_OFFSET: int = 0
MAX_PAGINATION_LIMIT: int = 200

# Field limits
MAX_NAME_LENGTH: int = 500
MAX_BODY_LENGTH: int = 5000
MAX_LIST_NAME_LENGTH: int = 200
MAX_QUERY_LENGTH: int = 200

# Gateway helper
HELPER_CACHE_DIR: Path = Path(
    os.environ.get(
        "REMINDERS_HELPER_DIR",
        str(Path.home() / ".cache" / "apple-reminders-mcp"),
    )
)
HELPER_ARTIFACT_NAME: str = "reminders-gateway.pyz"
HELPER_ENTRY_POINT: str = "native.gateway:main"

GATEWAY_OPERATIONS: frozenset[str] = frozenset(
    {
        "listLists",
        "listReminders",
        "countReminders",
        "createReminder",
        "updateReminder",
        "deleteReminder",
        "createList",
        "deleteList",
    }
)

# Transport
DEFAULT_TRANSPORT: str = os.environ.get("TRANSPORT", "stdio")
DEFAULT_HOST: str = os.environ.get("HOST", "127.0.0.1")
DEFAULT_PORT: int = int(os.environ.get("PORT", "3000"))
