"""MCP Server for macOS Reminders."""

from .client import GatewayClient
from .exceptions import (
    AccessDeniedError,
    EventKitError,
    GatewayProtocolError,
    HelperBuildError,
    NotFoundError,
    NoWritableSourceError,
    OperationTimeoutError,
    PermissionTimeoutError,
    RemindersError,
    ValidationError,
)
from .helper import HelperBuilder
from .models import CreatedReminder, Priority, Reminder, ReminderList, ReminderPage

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Gateway
    "GatewayClient",
    "HelperBuilder",
    # Models
    "Priority",
    "ReminderList",
    "Reminder",
    "ReminderPage",
    "CreatedReminder",
    # Exceptions
    "RemindersError",
    "AccessDeniedError",
    "PermissionTimeoutError",
    "OperationTimeoutError",
    "NotFoundError",
    "ValidationError",
    "GatewayProtocolError",
    "HelperBuildError",
    "NoWritableSourceError",
    "EventKitError",
]
