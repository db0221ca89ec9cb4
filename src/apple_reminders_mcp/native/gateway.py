"""Gateway process entry point.

Usage:
    python reminders-gateway.pyz <operation> [<payload-json>]

Prints exactly one JSON envelope line on stdout, then exits 0 on success
or 1 on failure. Logging goes to stderr.
"""

import logging
import os
import sys

from ..envelope import error_envelope, success_envelope
from ..exceptions import RemindersError, ValidationError
from .operations import Store, run_operation

logger = logging.getLogger(__name__)


def open_store() -> Store:
    """Open the EventKit store, requesting Reminders access if needed."""
    try:
        from .store import ReminderStore
    except ImportError as e:
        raise RemindersError(
            "EventKit is not available. The gateway requires macOS 14 or later "
            f"with pyobjc-framework-EventKit installed ({e})."
        ) from e
    return ReminderStore()


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv

    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "WARNING"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        if not args:
            raise ValidationError("Missing operation argument")
        operation = args[0]
        payload = args[1] if len(args) > 1 else "{}"
        result = run_operation(operation, payload, open_store)
    except Exception as e:
        logger.debug("Gateway operation failed", exc_info=True)
        print(error_envelope(e), flush=True)
        sys.exit(1)

    print(success_envelope(result), flush=True)


if __name__ == "__main__":
    main()
