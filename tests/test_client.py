"""Tests for running gateway operations in a helper subprocess."""

import sys
from pathlib import Path

import pytest

import apple_reminders_mcp
from apple_reminders_mcp.client import GatewayClient
from apple_reminders_mcp.exceptions import (
    GatewayProtocolError,
    NotFoundError,
    OperationTimeoutError,
    RemindersError,
    ValidationError,
)
from apple_reminders_mcp.helper import HelperBuilder
from apple_reminders_mcp.models import CreateListInput


@pytest.fixture
def client(fake_gateway_package: Path, tmp_path: Path) -> GatewayClient:
    builder = HelperBuilder(
        source_dir=fake_gateway_package,
        artifact_path=tmp_path / "cache" / "gateway.pyz",
    )
    return GatewayClient(builder=builder, timeout=5)


async def test_success_envelope_result(client):
    result = await client.call("listLists", {"listName": "Work", "completed": None})

    assert result == {"listName": "Work"}


async def test_failure_envelope_raises_classified_error(client):
    with pytest.raises(NotFoundError, match="List 'Nope' not found"):
        await client.call("countReminders")


async def test_crash_without_envelope(client):
    with pytest.raises(GatewayProtocolError, match="boom"):
        await client.call("createList")


async def test_unparseable_output(client):
    with pytest.raises(GatewayProtocolError, match="Failed to parse gateway response"):
        await client.call("deleteList")


async def test_timeout(fake_gateway_package, tmp_path):
    builder = HelperBuilder(
        source_dir=fake_gateway_package,
        artifact_path=tmp_path / "cache" / "gateway.pyz",
    )
    client = GatewayClient(builder=builder, timeout=0.5)

    with pytest.raises(OperationTimeoutError, match="timed out"):
        await client.call("listReminders")


async def test_unknown_operation_is_rejected_before_build(client):
    with pytest.raises(ValidationError, match="Unsupported operation: bogus"):
        await client.call("bogus")

    assert not client._builder.artifact_path.exists()


# The real gateway, built from this package


@pytest.fixture
def real_client(tmp_path: Path) -> GatewayClient:
    builder = HelperBuilder(
        source_dir=Path(apple_reminders_mcp.__file__).parent,
        artifact_path=tmp_path / "cache" / "reminders-gateway.pyz",
    )
    return GatewayClient(builder=builder, timeout=30)


async def test_real_gateway_validates_payload(real_client):
    with pytest.raises(ValidationError, match="name"):
        await real_client.call("createList", {"name": ""})


async def test_real_gateway_rejects_unknown_fields(real_client):
    with pytest.raises(ValidationError):
        await real_client.call("deleteList", {"name": "Work", "color": "red"})


@pytest.mark.skipif(sys.platform == "darwin", reason="EventKit is available on macOS")
async def test_real_gateway_without_eventkit(real_client):
    with pytest.raises(RemindersError, match="EventKit is not available"):
        await real_client.call("deleteList", CreateListInput(name="Work"))
