"""Envelope codec for the gateway process boundary.

Every gateway reply is a single line of JSON:

    {"ok": true, "result": ...}
    {"ok": false, "error": "List 'Work' not found", "kind": "not_found"}

A failure envelope is a recoverable domain error, not a crash.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import to_json

from .exceptions import GatewayProtocolError, RemindersError, error_from_kind


class Envelope(BaseModel):
    """Discriminated success/failure wrapper around a gateway reply."""

    ok: bool
    result: Any = None
    error: str | None = None
    kind: str | None = None


def encode_payload(payload: BaseModel | Mapping[str, Any] | None) -> str:
    """Serialize an outbound request payload to compact JSON."""
    if payload is None:
        return "{}"
    if isinstance(payload, BaseModel):
        return payload.model_dump_json(by_alias=True, exclude_none=True)
    return to_json({k: v for k, v in payload.items() if v is not None}).decode()


def success_envelope(result: Any) -> str:
    """Encode a success envelope."""
    return Envelope(ok=True, result=result).model_dump_json(exclude_none=True)


def error_envelope(error: BaseException) -> str:
    """Encode a failure envelope, tagging classified errors with their kind."""
    if isinstance(error, RemindersError):
        envelope = Envelope(ok=False, error=error.message, kind=error.kind)
    else:
        envelope = Envelope(ok=False, error=str(error) or type(error).__name__)
    return envelope.model_dump_json(exclude_none=True)


def decode_envelope(stdout: str, operation: str) -> Any:
    """Parse a gateway reply and return its result.

    Args:
        stdout: Everything the gateway printed
        operation: Operation name, for error messages

    Returns:
        The operation-specific result payload

    Raises:
        GatewayProtocolError: If the reply is empty or not an envelope
        RemindersError: The classified domain error from a failure envelope
    """
    raw = stdout.strip()
    if not raw:
        raise GatewayProtocolError(
            f"Gateway returned empty response for operation '{operation}'"
        )

    # The envelope is the last line; anything before it is stray output
    line = raw.splitlines()[-1]
    try:
        envelope = Envelope.model_validate_json(line)
    except PydanticValidationError as e:
        raise GatewayProtocolError(
            f"Failed to parse gateway response for '{operation}': {raw}"
        ) from e

    if not envelope.ok:
        raise error_from_kind(
            envelope.kind,
            envelope.error or f"Gateway failed for operation '{operation}'",
        )

    if "result" not in envelope.model_fields_set:
        raise GatewayProtocolError(
            f"Gateway response for '{operation}' is missing a result"
        )

    return envelope.result
