"""Per-node dispatch: read status, resolve the next action, run it."""
import asyncio
import logging

from maasflow.core.actions import Action, action_name
from maasflow.core.lifecycle import state_kind
from maasflow.core.node_status import state_name_for
from maasflow.core.options import ProcessingOptions
from maasflow.core.transitions import TRANSITIONS, TransitionTable
from maasflow.maas.client import MaasClient
from maasflow.maas.models import MaasNode, StatusReadError

logger = logging.getLogger(__name__)


def current_state(node: MaasNode) -> str:
    """Named lifecycle state of a node.

    Raises:
        StatusReadError: If the status is missing, malformed or unknown
    """
    code = node.status_code()
    try:
        return state_name_for(code)
    except ValueError:
        raise StatusReadError(node.hostname, f"unknown status code {code}")


async def _run_action(
    action: Action,
    client: MaasClient,
    node: MaasNode,
    options: ProcessingOptions,
) -> None:
    try:
        await action(client, node, options)
    except Exception as e:
        logger.error(f"Action {action_name(action)} failed for node '{node.hostname}': {e}")
        raise


async def process_node(
    client: MaasClient,
    node: MaasNode,
    options: ProcessingOptions,
    table: TransitionTable = TRANSITIONS,
) -> asyncio.Task | None:
    """Resolve and run the next action for one node.

    In preview mode the action is awaited here and its errors propagate.
    Otherwise it is started as a task, which is returned without waiting;
    the caller owns joining it.

    Raises:
        StatusReadError: If the node status cannot be read
        TransitionLookupError: If no action is declared for the node's state
    """
    state = current_state(node)
    action = table.resolve(options.target_state, state)
    kind = state_kind(state)
    logger.debug(
        f"Node '{node.hostname}' is {state} ({kind.value if kind else 'unclassified'}), "
        f"target {options.target_state}: {action_name(action)}"
    )

    if options.preview:
        await _run_action(action, client, node, options)
        return None

    return asyncio.create_task(
        _run_action(action, client, node, options),
        name=f"{action_name(action)}:{node.hostname}",
    )
