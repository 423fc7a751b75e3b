"""Host and zone filters deciding which nodes a batch run may touch."""
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from maasflow.core.options import (
    HOST_EMPTY_POLICY,
    ZONE_EMPTY_POLICY,
    EmptyFilterPolicy,
    FilterOptions,
    ProcessingOptions,
)
from maasflow.maas.models import MaasNode

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when processing configuration is unusable."""


class FilterCompileError(ConfigurationError):
    """Raised when a filter pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"Invalid filter pattern '{pattern}': {reason}")


def compile_filter(patterns: Iterable[str]) -> tuple[re.Pattern, ...]:
    """Compile a list of regular expressions.

    Raises:
        FilterCompileError: On the first pattern that fails to compile
    """
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise FilterCompileError(pattern, str(e))
    return tuple(compiled)


def matches(compiled: Sequence[re.Pattern], value: str) -> bool:
    """True if any pattern matches anywhere in ``value``."""
    return any(pattern.search(value) for pattern in compiled)


@dataclass(frozen=True)
class CompiledFilter:
    """Compiled include/exclude patterns for one node attribute."""
    name: str
    include: tuple[re.Pattern, ...]
    exclude: tuple[re.Pattern, ...]
    empty_policy: EmptyFilterPolicy

    @classmethod
    def compile(
        cls,
        name: str,
        options: FilterOptions,
        default_policy: EmptyFilterPolicy,
    ) -> "CompiledFilter":
        return cls(
            name=name,
            include=compile_filter(options.include),
            exclude=compile_filter(options.exclude),
            empty_policy=options.policy_or(default_policy),
        )

    def included(self, value: str) -> bool:
        if not self.include:
            return self.empty_policy == EmptyFilterPolicy.INCLUDE_ALL
        return matches(self.include, value)

    def excluded(self, value: str) -> bool:
        return matches(self.exclude, value)

    @property
    def include_patterns(self) -> list[str]:
        return [p.pattern for p in self.include]

    @property
    def exclude_patterns(self) -> list[str]:
        return [p.pattern for p in self.exclude]


class FilterSet:
    """Host and zone filters compiled once per batch run."""

    def __init__(self, hosts: CompiledFilter, zones: CompiledFilter, verbose: bool = False):
        self.hosts = hosts
        self.zones = zones
        self.verbose = verbose

    @classmethod
    def from_options(cls, options: ProcessingOptions) -> "FilterSet":
        """Compile every pattern list in ``options``.

        Raises:
            FilterCompileError: If any pattern is invalid
        """
        return cls(
            hosts=CompiledFilter.compile("hostname", options.hosts, HOST_EMPTY_POLICY),
            zones=CompiledFilter.compile("zone", options.zones, ZONE_EMPTY_POLICY),
            verbose=options.verbose,
        )

    def _reject(self, node: MaasNode, message: str):
        # Rejection is routine; only surface it when asked to
        level = logging.INFO if self.verbose else logging.DEBUG
        logger.log(level, f"Ignoring node '{node.hostname}' as {message}")

    def is_eligible(self, node: MaasNode) -> bool:
        """Decide whether a node may be processed.

        Include filters are checked first (hostname, then zone), then the
        exclude filters. Any exclude match rejects the node.
        """
        if not self.hosts.included(node.hostname):
            self._reject(
                node,
                f"it didn't match include hostname filter {self.hosts.include_patterns}",
            )
            return False

        if not self.zones.included(node.zone):
            self._reject(
                node,
                f"its zone '{node.zone}' didn't match include zone filter "
                f"{self.zones.include_patterns}",
            )
            return False

        if self.hosts.excluded(node.hostname):
            self._reject(
                node,
                f"it matched exclude hostname filter {self.hosts.exclude_patterns}",
            )
            return False

        if self.zones.excluded(node.zone):
            self._reject(
                node,
                f"its zone '{node.zone}' matched exclude zone filter "
                f"{self.zones.exclude_patterns}",
            )
            return False

        return True
