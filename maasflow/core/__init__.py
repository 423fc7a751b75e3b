"""Lifecycle transition engine: table, actions, filters and dispatch."""
from maasflow.core.batch import ActionTimeoutError, process_all, summarize
from maasflow.core.dispatcher import process_node
from maasflow.core.filters import ConfigurationError, FilterCompileError, FilterSet
from maasflow.core.options import EmptyFilterPolicy, FilterOptions, ProcessingOptions
from maasflow.core.transitions import (
    TRANSITIONS,
    TransitionLookupError,
    TransitionTable,
    UnknownTargetError,
    UnknownTransitionError,
)

__all__ = [
    "ActionTimeoutError",
    "ConfigurationError",
    "EmptyFilterPolicy",
    "FilterCompileError",
    "FilterOptions",
    "FilterSet",
    "ProcessingOptions",
    "TRANSITIONS",
    "TransitionLookupError",
    "TransitionTable",
    "UnknownTargetError",
    "UnknownTransitionError",
    "process_all",
    "process_node",
    "summarize",
]
