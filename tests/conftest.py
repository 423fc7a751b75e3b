"""Shared test fixtures."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from maasflow.core.node_status import NodeStatus
from maasflow.core.options import EmptyFilterPolicy, FilterOptions, ProcessingOptions
from maasflow.maas.client import MaasClient
from maasflow.maas.models import MaasNode


def make_node(
    hostname: str = "web-01",
    zone: str = "us-east",
    status: NodeStatus | int | None = NodeStatus.READY,
    system_id: str | None = None,
) -> MaasNode:
    """Build a node record the way MAAS returns it."""
    data = {
        "system_id": system_id or f"id-{hostname}",
        "hostname": hostname,
        "zone": {"name": zone},
    }
    if status is not None:
        data["substatus"] = int(status)
    return MaasNode.from_json(data)


@pytest.fixture
def node_factory():
    """Factory for node records."""
    return make_node


@pytest.fixture
def mock_client():
    """Recording stand-in for the MAAS client."""
    client = MagicMock(spec=MaasClient)
    client.start = AsyncMock(return_value=None)
    client.acquire = AsyncMock(return_value=None)
    client.commission = AsyncMock(return_value=None)
    client.list_nodes = AsyncMock(return_value=[])
    return client


@pytest.fixture
def options():
    """Options that select every node."""
    return ProcessingOptions(
        zones=FilterOptions(empty_policy=EmptyFilterPolicy.INCLUDE_ALL),
        action_timeout=5.0,
    )


@pytest.fixture
def preview_options(options):
    """Select-all options in preview mode."""
    return options.model_copy(update={"preview": True})
