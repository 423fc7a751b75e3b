"""Hand-authored next-step table from (target state, current state) to action."""
import logging
from types import MappingProxyType
from typing import Mapping

from maasflow.core import actions
from maasflow.core.actions import Action
from maasflow.core.lifecycle import DEFAULT_GRAPH, INITIAL_STATE, LifecycleGraph

logger = logging.getLogger(__name__)


class TransitionLookupError(LookupError):
    """Base class for failed transition table lookups."""


class UnknownTargetError(TransitionLookupError):
    """Raised when no transitions are declared toward a target state."""

    def __init__(self, target: str):
        self.target = target
        super().__init__(f"Could not find transitions to target state '{target}'")


class UnknownTransitionError(TransitionLookupError):
    """Raised when a current state has no action declared for a target."""

    def __init__(self, target: str, current: str):
        self.target = target
        self.current = current
        super().__init__(
            f"Could not find transition from current state '{current}' "
            f"to target state '{target}'"
        )


class TransitionTable:
    """Immutable two-level lookup table: target -> current -> action.

    The table is the source of truth for what to do next. It is not
    derived from the lifecycle graph; use ``validate_coverage`` to spot
    states the graph can reach but the table does not handle.
    """

    def __init__(self, table: Mapping[str, Mapping[str, Action]]):
        self._table = MappingProxyType({
            target: MappingProxyType(dict(entries))
            for target, entries in table.items()
        })

    @property
    def targets(self) -> list[str]:
        return list(self._table)

    def actions_for(self, target: str) -> Mapping[str, Action]:
        """Read-only view of the sub-table for one target.

        Raises:
            UnknownTargetError: If the target is not declared
        """
        try:
            return self._table[target]
        except KeyError:
            raise UnknownTargetError(target) from None

    def resolve(self, target: str, current: str) -> Action:
        """Return the action that moves a node in ``current`` toward ``target``.

        Raises:
            UnknownTargetError: If no transitions are declared for the target
            UnknownTransitionError: If the current state has no entry
        """
        entries = self.actions_for(target)
        try:
            return entries[current]
        except KeyError:
            raise UnknownTransitionError(target, current) from None

    def validate_coverage(
        self,
        graph: LifecycleGraph = DEFAULT_GRAPH,
        start: str = INITIAL_STATE,
    ) -> dict[str, list[str]]:
        """Warn about graph-reachable states missing from each target's table.

        Never raises. Returns the missing states per target, sorted.
        """
        reachable = graph.reachable_from(start)
        missing: dict[str, list[str]] = {}
        for target, entries in self._table.items():
            gaps = sorted(reachable - set(entries))
            if gaps:
                logger.warning(
                    f"Transition table for target '{target}' has no action for "
                    f"reachable states: {', '.join(gaps)}"
                )
            missing[target] = gaps
        return missing


TRANSITIONS = TransitionTable({
    "Deployed": {
        "New": actions.commission,
        "Deployed": actions.done,
        "Ready": actions.acquire,
        "Allocated": actions.deploy,
        "Retired": actions.admin_state,
        "Reserved": actions.admin_state,
        "Releasing": actions.wait,
        "DiskErasing": actions.wait,
        "Deploying": actions.wait,
        "Commissioning": actions.wait,
        "Missing": actions.fail,
        "FailedReleasing": actions.fail,
        "FailedDiskErasing": actions.fail,
        "FailedDeployment": actions.fail,
        "Broken": actions.fail,
        "FailedCommissioning": actions.fail,
    },
})
