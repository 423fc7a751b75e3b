"""Machine lifecycle state graph.

The graph describes every legal lifecycle state and the directed edges
between them. It is reference material only: the transition table in
``maasflow.core.transitions`` is authored by hand and is checked against
this graph at startup, never derived from it.
"""
import re
from collections import deque
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class LifecycleGraphError(ValueError):
    """Raised when a lifecycle graph definition cannot be parsed."""

    def __init__(self, line_no: int, line: str):
        self.line_no = line_no
        self.line = line
        super().__init__(f"Invalid lifecycle edge on line {line_no}: '{line}'")


class StateKind(str, Enum):
    """Broad classification of lifecycle states."""

    PROGRESSING = "progressing"  # transient, expected to change on its own
    STABLE = "stable"  # rest point reachable by automation
    FAILED = "failed"  # needs an operator, never auto-recovered
    ADMINISTRATIVE = "administrative"  # deliberately frozen


STATE_KINDS: Mapping[str, StateKind] = MappingProxyType({
    "New": StateKind.STABLE,
    "Commissioning": StateKind.PROGRESSING,
    "FailedCommissioning": StateKind.FAILED,
    "Missing": StateKind.FAILED,
    "Ready": StateKind.STABLE,
    "Reserved": StateKind.ADMINISTRATIVE,
    "Deployed": StateKind.STABLE,
    "Retired": StateKind.ADMINISTRATIVE,
    "Broken": StateKind.FAILED,
    "Deploying": StateKind.PROGRESSING,
    "Allocated": StateKind.STABLE,
    "FailedDeployment": StateKind.FAILED,
    "Releasing": StateKind.PROGRESSING,
    "FailedReleasing": StateKind.FAILED,
    "DiskErasing": StateKind.PROGRESSING,
    "FailedDiskErasing": StateKind.FAILED,
})

INITIAL_STATE = "New"

DEFAULT_LIFECYCLE = """
    (New)->(Commissioning)
    (Commissioning)->(FailedCommissioning)
    (FailedCommissioning)->(New)
    (Commissioning)->(Ready)
    (Ready)->(Deploying)
    (Ready)->(Allocated)
    (Allocated)->(Deploying)
    (Deploying)->(Deployed)
    (Deploying)->(FailedDeployment)
    (FailedDeployment)->(Broken)
    (Deployed)->(Releasing)
    (Releasing)->(FailedReleasing)
    (FailedReleasing)->(Broken)
    (Releasing)->(DiskErasing)
    (DiskErasing)->(FailedDiskErasing)
    (FailedDiskErasing)->(Broken)
    (Releasing)->(Ready)
    (DiskErasing)->(Ready)
    (Broken)->(Ready)
"""

_EDGE_RE = re.compile(r"^\((\w+)\)\s*->\s*\((\w+)\)$")


def parse_lifecycle(text: str) -> dict[str, tuple[str, ...]]:
    """Parse an edge list of the form ``(From)->(To)``, one edge per line.

    Blank lines are ignored. Every state named on either side of an edge
    gets an entry, so terminal states map to an empty tuple.

    Raises:
        LifecycleGraphError: If a non-blank line is not a valid edge
    """
    edges: dict[str, list[str]] = {}
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        match = _EDGE_RE.match(line)
        if match is None:
            raise LifecycleGraphError(line_no, line)
        source, dest = match.groups()
        targets = edges.setdefault(source, [])
        if dest not in targets:
            targets.append(dest)
        edges.setdefault(dest, [])
    return {state: tuple(targets) for state, targets in edges.items()}


class LifecycleGraph:
    """Directed graph of lifecycle states."""

    def __init__(self, edges: Mapping[str, tuple[str, ...]]):
        self._edges = MappingProxyType(dict(edges))

    @classmethod
    def from_text(cls, text: str) -> "LifecycleGraph":
        return cls(parse_lifecycle(text))

    @property
    def states(self) -> list[str]:
        return list(self._edges)

    def successors(self, state: str) -> tuple[str, ...]:
        return self._edges.get(state, ())

    def has_edge(self, from_state: str, to_state: str) -> bool:
        return to_state in self.successors(from_state)

    def reachable_from(self, start: str = INITIAL_STATE) -> set[str]:
        """Return every state reachable from ``start``, including itself."""
        if start not in self._edges:
            return set()
        seen = {start}
        queue = deque([start])
        while queue:
            for nxt in self.successors(queue.popleft()):
                if nxt not in seen:
                    seen.add(nxt)
                    queue.append(nxt)
        return seen


def state_kind(state: str) -> StateKind | None:
    """Classify a state, or None for a state this module does not know."""
    return STATE_KINDS.get(state)


DEFAULT_GRAPH = LifecycleGraph.from_text(DEFAULT_LIFECYCLE)
