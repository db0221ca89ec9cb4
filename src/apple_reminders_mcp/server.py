"""FastMCP server for macOS Reminders via an EventKit gateway process."""

import argparse
import logging
import os
import signal
import sys
from typing import Any

import anyio
from fastmcp import FastMCP
from mcp.types import ToolAnnotations

from .client import GatewayClient
from .constants import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TRANSPORT
from .exceptions import AccessDeniedError, RemindersError
from .tools.lists import create_reminder_list, delete_reminder_list, list_reminder_lists
from .tools.reminders import (
    count_reminders,
    create_reminder,
    delete_reminder,
    list_reminders,
    update_reminder,
)
from .tools.search import search_reminders

# Configure logging
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastMCP server instance
mcp = FastMCP(
    name="apple-reminders-mcp",
    instructions="""
An MCP server for macOS Reminders via EventKit.

Reminders are addressed by list name and exact reminder name. When a list
holds several reminders with the same name, the first one in list order is
used.

## Available Tools

### List Management (3 tools)
| Tool | Purpose |
|------|---------|
| list_reminder_lists | Get all reminder lists |
| create_reminder_list | Create a new list |
| delete_reminder_list | Delete a list and all its reminders |

### Reminders (5 tools)
| Tool | Purpose |
|------|---------|
| list_reminders | Page through reminders, filtered by list and completion |
| count_reminders | Count reminders matching the same filters |
| create_reminder | Create with name, notes, due date, alarm, priority |
| update_reminder | Update any reminder fields, or mark complete |
| delete_reminder | Delete a reminder |

### Search (1 tool)
| Tool | Purpose |
|------|---------|
| search_reminders | Search reminders by name |

## Ordering
Reminders with a due date come first, earliest due first; the rest follow,
most recently modified first.

## Dates
Timed dates are ISO 8601; without an offset they are read in local time.
A plain "YYYY-MM-DD" due date creates an all-day reminder.

## Priority
0 = none, 1-4 = low, 5-8 = medium, 9 = high.
""",
)

# Register all MCP tools

# Reads never change the store; deletes cannot be undone
READ_ONLY = ToolAnnotations(
    readOnlyHint=True,
    destructiveHint=False,
    idempotentHint=True,
    openWorldHint=False,
)
WRITE = ToolAnnotations(
    readOnlyHint=False,
    destructiveHint=False,
    idempotentHint=False,
    openWorldHint=False,
)
DESTRUCTIVE = ToolAnnotations(
    readOnlyHint=False,
    destructiveHint=True,
    idempotentHint=False,
    openWorldHint=False,
)

# List management tools
mcp.tool(list_reminder_lists, annotations=READ_ONLY)
mcp.tool(create_reminder_list, annotations=WRITE)
mcp.tool(delete_reminder_list, annotations=DESTRUCTIVE)

# Reminder tools
mcp.tool(list_reminders, annotations=READ_ONLY)
mcp.tool(count_reminders, annotations=READ_ONLY)
mcp.tool(create_reminder, annotations=WRITE)
mcp.tool(update_reminder, annotations=WRITE)
mcp.tool(delete_reminder, annotations=DESTRUCTIVE)

# Search tool
mcp.tool(search_reminders, annotations=READ_ONLY)


# Signal handling for graceful shutdown
def signal_handler(signum: int, frame: Any) -> None:
    """Handle shutdown signals."""
    logger.info(f"Received signal {signum}, shutting down...")
    sys.exit(0)


def main() -> None:
    parser = argparse.ArgumentParser(description="An MCP Server for macOS Reminders")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default=DEFAULT_TRANSPORT,
        help="Transport to serve on (default: $TRANSPORT or stdio)",
    )
    parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help="Host to bind for the http transport (default: $HOST or 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help="Port for the http transport (default: $PORT or 3000)",
    )
    args = parser.parse_args()

    # Build the gateway helper and request Reminders access at startup.
    # This ensures the permission dialog appears immediately rather than
    # on the first tool call
    try:
        logger.info("Requesting Reminders access...")
        lists = anyio.run(GatewayClient.get_instance().call, "listLists")
        logger.info(f"Reminders access granted ({len(lists)} lists)")
    except AccessDeniedError as e:
        logger.error(f"Failed to initialize Reminders access: {e}")
        sys.exit(1)
    except RemindersError as e:
        logger.error(f"Failed to start reminders gateway: {e}")
        sys.exit(1)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if args.transport == "http":
        logger.info(f"Serving over HTTP on {args.host}:{args.port}")
        mcp.run(transport="http", host=args.host, port=args.port)
    else:
        mcp.run()


if __name__ == "__main__":
    main()
