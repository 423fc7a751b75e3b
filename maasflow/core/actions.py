"""Lifecycle actions: the single step taken to move a node toward its target.

Every action logs one line naming itself and the node. Only ``deploy``,
``acquire`` and ``commission`` call the MAAS API, and only outside preview
mode. Errors from the API propagate as ``MaasClientError``.
"""
import logging
from typing import Awaitable, Callable

from maasflow.core.options import ProcessingOptions
from maasflow.maas.client import MaasClient
from maasflow.maas.models import MaasNode

logger = logging.getLogger(__name__)

Action = Callable[[MaasClient, MaasNode, ProcessingOptions], Awaitable[None]]


def _preview_suffix(options: ProcessingOptions) -> str:
    return " (preview)" if options.preview else ""


async def done(client: MaasClient, node: MaasNode, options: ProcessingOptions) -> None:
    """Node is at its target state, nothing to do."""
    logger.info(f"COMPLETE: {node.hostname}")


async def deploy(client: MaasClient, node: MaasNode, options: ProcessingOptions) -> None:
    """Start deployment of an allocated node."""
    logger.info(f"DEPLOY: {node.hostname}{_preview_suffix(options)}")
    if not options.preview:
        await client.start(node.system_id)


async def acquire(client: MaasClient, node: MaasNode, options: ProcessingOptions) -> None:
    """Allocate a ready node to the API user."""
    logger.info(f"ACQUIRE: {node.hostname}{_preview_suffix(options)}")
    if not options.preview:
        await client.acquire(node.hostname)


async def commission(client: MaasClient, node: MaasNode, options: ProcessingOptions) -> None:
    """Commission a newly enlisted node."""
    logger.info(f"COMMISSION: {node.hostname}{_preview_suffix(options)}")
    if not options.preview:
        await client.commission(node.system_id)


async def wait(client: MaasClient, node: MaasNode, options: ProcessingOptions) -> None:
    """A previous operation is still in flight on the MAAS side."""
    logger.info(f"WAIT: {node.hostname}")


async def fail(client: MaasClient, node: MaasNode, options: ProcessingOptions) -> None:
    """Node is in a state automation cannot recover from."""
    logger.warning(f"FAIL: {node.hostname}")


async def admin_state(client: MaasClient, node: MaasNode, options: ProcessingOptions) -> None:
    """Node is administratively held and must not be transitioned."""
    logger.info(f"ADMIN: {node.hostname}")


# Actions that call the MAAS API when not previewing
SIDE_EFFECT_ACTIONS: frozenset[Action] = frozenset({deploy, acquire, commission})


def action_name(action: Action) -> str:
    return getattr(action, "__name__", repr(action))
