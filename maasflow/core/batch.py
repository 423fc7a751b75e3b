"""Batch processing of the node inventory.

The batch processor:
- Compiles the host and zone filters once per run
- Dispatches every eligible node in inventory order
- Joins the launched action tasks with a bounded timeout
- Returns one result slot per node, ``None`` meaning no error
"""
import asyncio
import logging
from collections import Counter
from typing import Sequence

from pydantic import BaseModel

from maasflow.core.dispatcher import process_node
from maasflow.core.filters import FilterSet
from maasflow.core.options import ProcessingOptions
from maasflow.core.transitions import TRANSITIONS, TransitionLookupError, TransitionTable
from maasflow.maas.client import MaasClient, MaasClientError
from maasflow.maas.models import MaasNode, StatusReadError

logger = logging.getLogger(__name__)

# Per-node failures: recorded in the node's slot, never abort the batch
NODE_ERRORS = (TransitionLookupError, StatusReadError, MaasClientError)


class ActionTimeoutError(Exception):
    """Raised in place of an action that did not finish before the deadline."""

    def __init__(self, hostname: str, timeout: float):
        self.hostname = hostname
        self.timeout = timeout
        super().__init__(
            f"Action for node '{hostname}' did not complete within {timeout}s"
        )


class BatchSummary(BaseModel):
    """Counts over one batch result list."""

    total: int = 0
    failed: int = 0
    errors: dict[str, int] = {}

    @property
    def succeeded(self) -> int:
        return self.total - self.failed


async def _join(
    tasks: dict[asyncio.Task, int],
    nodes: Sequence[MaasNode],
    results: list[Exception | None],
    timeout: float,
):
    """Wait for launched actions and record their outcome by node index."""
    if not tasks:
        return

    done, pending = await asyncio.wait(set(tasks), timeout=timeout)

    for task in done:
        if task.cancelled():
            continue
        error = task.exception()
        if error is not None:
            results[tasks[task]] = error

    for task in pending:
        index = tasks[task]
        logger.warning(
            f"Cancelling action for node '{nodes[index].hostname}' after {timeout}s"
        )
        task.cancel()
        results[index] = ActionTimeoutError(nodes[index].hostname, timeout)

    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


async def process_all(
    client: MaasClient,
    nodes: Sequence[MaasNode],
    options: ProcessingOptions,
    table: TransitionTable = TRANSITIONS,
) -> list[Exception | None]:
    """Process every node and return per-node errors in input order.

    Raises:
        ConfigurationError: If a filter pattern is invalid. Raised before
            any node is processed.
    """
    filters = FilterSet.from_options(options)
    results: list[Exception | None] = [None] * len(nodes)
    tasks: dict[asyncio.Task, int] = {}

    for index, node in enumerate(nodes):
        if not filters.is_eligible(node):
            continue
        try:
            task = await process_node(client, node, options, table)
        except NODE_ERRORS as e:
            logger.warning(f"Unable to process node '{node.hostname}': {e}")
            results[index] = e
            continue
        except Exception as e:
            # Inline (preview) actions are recorded like launched ones
            logger.exception(f"Unexpected error processing node '{node.hostname}': {e}")
            results[index] = e
            continue
        if task is not None:
            tasks[task] = index

    await _join(tasks, nodes, results, options.action_timeout)
    return results


def summarize(results: Sequence[Exception | None]) -> BatchSummary:
    """Count failures in a batch result list, grouped by error type."""
    errors = Counter(type(r).__name__ for r in results if r is not None)
    return BatchSummary(
        total=len(results),
        failed=sum(errors.values()),
        errors=dict(errors),
    )
