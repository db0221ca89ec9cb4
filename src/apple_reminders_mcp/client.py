"""Client side of the gateway process boundary.

Each call is one blocking round trip: make sure the helper archive is
current, run it with the operation name and JSON payload as arguments,
and decode the envelope it prints.
"""

import logging
import sys
import threading
from collections.abc import Mapping
from typing import Any

import anyio
from pydantic import BaseModel

from .constants import GATEWAY_OPERATIONS, GATEWAY_TIMEOUT
from .envelope import decode_envelope, encode_payload
from .exceptions import GatewayProtocolError, OperationTimeoutError, ValidationError
from .helper import HelperBuilder

logger = logging.getLogger(__name__)


class GatewayClient:
    """Runs gateway operations in a helper subprocess.

    Usage:
        client = GatewayClient.get_instance()
        lists = await client.call("listLists")
    """

    _instance: "GatewayClient | None" = None
    _lock = threading.Lock()

    def __init__(
        self,
        builder: HelperBuilder | None = None,
        timeout: float = GATEWAY_TIMEOUT,
        python: str = sys.executable,
    ) -> None:
        self._builder = builder or HelperBuilder.get_instance()
        self._timeout = timeout
        self._python = python

    @classmethod
    def get_instance(cls) -> "GatewayClient":
        """Get or create the singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    async def call(
        self,
        operation: str,
        payload: BaseModel | Mapping[str, Any] | None = None,
    ) -> Any:
        """Run one gateway operation.

        Args:
            operation: One of the gateway operation names
            payload: Request model or mapping, sent as JSON

        Returns:
            The operation-specific result from the success envelope

        Raises:
            ValidationError: If the operation name is unknown
            HelperBuildError: If the helper cannot be built
            OperationTimeoutError: If the round trip exceeds the timeout
            GatewayProtocolError: If the helper printed no usable envelope
            RemindersError: The domain error reported by the helper
        """
        if operation not in GATEWAY_OPERATIONS:
            raise ValidationError(f"Unsupported operation: {operation}")

        artifact = await self._builder.ensure_built()
        command = [self._python, str(artifact), operation, encode_payload(payload)]
        logger.debug(f"Invoking gateway operation {operation}")

        try:
            with anyio.fail_after(self._timeout):
                completed = await anyio.run_process(command, check=False)
        except TimeoutError as e:
            raise OperationTimeoutError(
                f"Gateway operation '{operation}' timed out after {self._timeout:g}s"
            ) from e

        stdout = completed.stdout.decode("utf-8", errors="replace")
        stderr = completed.stderr.decode("utf-8", errors="replace").strip()
        if stderr:
            logger.debug(f"Gateway stderr for {operation}: {stderr}")

        if completed.returncode != 0 and not stdout.strip():
            details = stderr or f"exit status {completed.returncode}"
            raise GatewayProtocolError(
                f"Gateway operation '{operation}' failed: {details}"
            )

        # A failing helper prints its error envelope before exiting non-zero
        return decode_envelope(stdout, operation)
