"""Tests for the lifecycle graph and status codes."""
import pytest

from maasflow.core.lifecycle import (
    DEFAULT_GRAPH,
    STATE_KINDS,
    LifecycleGraph,
    LifecycleGraphError,
    StateKind,
    parse_lifecycle,
    state_kind,
)
from maasflow.core.node_status import NodeStatus, state_name_for


class TestParseLifecycle:
    """Test the edge list parser."""

    def test_parses_edges(self):
        """Each line becomes one edge."""
        edges = parse_lifecycle("(A)->(B)\n(A)->(C)\n(B)->(C)")
        assert edges == {"A": ("B", "C"), "B": ("C",), "C": ()}

    def test_ignores_blank_lines_and_whitespace(self):
        """Blank lines and indentation are ignored."""
        edges = parse_lifecycle("\n    (A) -> (B)\n\n")
        assert edges == {"A": ("B",), "B": ()}

    def test_duplicate_edges_collapsed(self):
        """Repeating an edge does not duplicate the successor."""
        edges = parse_lifecycle("(A)->(B)\n(A)->(B)")
        assert edges["A"] == ("B",)

    def test_invalid_line_raises(self):
        """Malformed lines report their line number."""
        with pytest.raises(LifecycleGraphError) as exc_info:
            parse_lifecycle("(A)->(B)\nA -> C")
        assert exc_info.value.line_no == 2
        assert "A -> C" in str(exc_info.value)


class TestLifecycleGraph:
    """Test the default lifecycle graph."""

    def test_default_edges(self):
        """Key lifecycle edges are present."""
        assert DEFAULT_GRAPH.has_edge("New", "Commissioning")
        assert DEFAULT_GRAPH.has_edge("Ready", "Allocated")
        assert DEFAULT_GRAPH.has_edge("Allocated", "Deploying")
        assert DEFAULT_GRAPH.has_edge("Deploying", "Deployed")
        assert not DEFAULT_GRAPH.has_edge("New", "Deployed")

    def test_reachable_from_new(self):
        """Every graph state except unreachable ones is reachable from New."""
        reachable = DEFAULT_GRAPH.reachable_from("New")
        assert {"New", "Ready", "Deployed", "Broken", "FailedDiskErasing"} <= reachable
        assert "Retired" not in reachable
        assert "Missing" not in reachable

    def test_reachable_from_unknown_state(self):
        """Unknown start states reach nothing."""
        assert DEFAULT_GRAPH.reachable_from("Nowhere") == set()

    def test_reachable_respects_direction(self):
        """Reachability follows edge direction only."""
        graph = LifecycleGraph.from_text("(A)->(B)\n(C)->(A)")
        assert graph.reachable_from("A") == {"A", "B"}

    def test_graph_states_are_classified(self):
        """Every state in the default graph has a kind."""
        for state in DEFAULT_GRAPH.states:
            assert state in STATE_KINDS


class TestStateKind:
    """Test state classification."""

    def test_kinds(self):
        """Representative states of each kind."""
        assert state_kind("Commissioning") == StateKind.PROGRESSING
        assert state_kind("Deployed") == StateKind.STABLE
        assert state_kind("FailedDeployment") == StateKind.FAILED
        assert state_kind("Retired") == StateKind.ADMINISTRATIVE

    def test_unknown_state(self):
        """Unknown states are unclassified."""
        assert state_kind("Exploded") is None


class TestNodeStatus:
    """Test status code to state name mapping."""

    def test_state_names(self):
        """Codes map to lifecycle labels."""
        assert state_name_for(0) == "New"
        assert state_name_for(4) == "Ready"
        assert state_name_for(6) == "Deployed"
        assert state_name_for(10) == "Allocated"
        assert state_name_for(11) == "FailedDeployment"
        assert state_name_for(14) == "DiskErasing"
        assert state_name_for(15) == "FailedDiskErasing"

    def test_every_status_is_classified(self):
        """All status codes name a classified state."""
        for status in NodeStatus:
            assert status.state_name in STATE_KINDS

    def test_unknown_code(self):
        """Unknown codes raise ValueError."""
        with pytest.raises(ValueError):
            state_name_for(99)
