"""Exceptions for MCP Server for macOS reminders.

Every exception carries a ``kind`` tag. The gateway process writes the tag
into its error envelope so the calling process can raise the same class
again on its side of the process boundary.
"""


class RemindersError(Exception):
    """Base exception for Reminders MCP operations.

    Attributes:
        message: Human-readable error description
    """

    kind: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class AccessDeniedError(RemindersError):
    """User hasn't granted Reminders access.

    To fix: Open System Settings > Privacy & Security > Reminders
    and grant access to this application.
    """

    kind = "permission"

    def __init__(self, message: str | None = None) -> None:
        default_msg = (
            "Reminders access denied. Please grant full access in "
            "System Settings > Privacy & Security > Reminders."
        )
        super().__init__(message or default_msg)


class NotFoundError(RemindersError):
    """Reminder or list not found."""

    kind = "not_found"


class ValidationError(RemindersError):
    """Request was malformed, empty, duplicated or changed nothing."""

    kind = "validation"


class OperationTimeoutError(RemindersError, TimeoutError):
    """A permission prompt or data round trip exceeded its bound."""

    kind = "timeout"


class PermissionTimeoutError(OperationTimeoutError):
    """Permission request timed out waiting for user response."""

    def __init__(self, timeout_seconds: float = 20) -> None:
        super().__init__(
            f"Permission request timed out after {timeout_seconds:g} seconds. "
            "Please respond to the permission dialog and try again."
        )
        self.timeout_seconds = timeout_seconds


class GatewayProtocolError(RemindersError):
    """The gateway printed nothing usable or an unparseable envelope."""

    kind = "protocol"


class HelperBuildError(RemindersError):
    """The gateway helper could not be built from its sources."""

    kind = "build"


class EventKitError(RemindersError):
    """General EventKit operation error with NSError details."""

    kind = "eventkit"

    def __init__(
        self,
        message: str,
        domain: str | None = None,
        code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.domain = domain
        self.code = code

    @classmethod
    def from_nserror(cls, error: object, fallback: str) -> "EventKitError":
        """Create from an NSError object."""
        if error is None:
            return cls(fallback)

        # Extract NSError details
        try:
            domain = str(error.domain()) if hasattr(error, "domain") else None
            code = int(error.code()) if hasattr(error, "code") else None
            description = (
                str(error.localizedDescription())
                if hasattr(error, "localizedDescription")
                else str(error)
            )
        except Exception:
            return cls(f"{fallback}: {error}")

        return cls(f"{fallback}: {description}", domain=domain, code=code)


class NoWritableSourceError(EventKitError):
    """No writable calendar source available for reminders.

    This can happen if all calendar accounts are read-only or
    if no reminder accounts are configured.
    """

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "No writable source available for reminders. "
            "Please configure a reminder account in System Settings > Internet Accounts."
        )


_KINDS: dict[str, type[RemindersError]] = {
    cls.kind: cls
    for cls in (
        RemindersError,
        AccessDeniedError,
        NotFoundError,
        ValidationError,
        OperationTimeoutError,
        GatewayProtocolError,
        HelperBuildError,
        EventKitError,
    )
}


def error_from_kind(kind: str | None, message: str) -> RemindersError:
    """Rebuild a classified error from an envelope's ``kind`` and message."""
    cls = _KINDS.get(kind or "", RemindersError)
    return cls(message)
