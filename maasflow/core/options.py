"""Processing options shared read-only across a batch run."""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EmptyFilterPolicy(str, Enum):
    """What an empty include list matches."""

    INCLUDE_ALL = "include_all"
    INCLUDE_NONE = "include_none"


# Applied when a filter leaves empty_policy unset
HOST_EMPTY_POLICY = EmptyFilterPolicy.INCLUDE_ALL
ZONE_EMPTY_POLICY = EmptyFilterPolicy.INCLUDE_NONE


class FilterOptions(BaseModel):
    """Include and exclude regular expressions for one node attribute.

    ``empty_policy`` decides what an empty include list matches. When unset,
    the filter dimension supplies its own default.
    """
    model_config = ConfigDict(frozen=True)

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    empty_policy: EmptyFilterPolicy | None = None

    def policy_or(self, default: EmptyFilterPolicy) -> EmptyFilterPolicy:
        return self.empty_policy if self.empty_policy is not None else default


class ProcessingOptions(BaseModel):
    """Options for one batch run.

    Hostnames are included by default when no include pattern is given,
    zones are not: a run that names no zone touches no node.
    """
    model_config = ConfigDict(frozen=True)

    hosts: FilterOptions = Field(default_factory=FilterOptions)
    zones: FilterOptions = Field(default_factory=FilterOptions)
    verbose: bool = False
    preview: bool = False
    target_state: str = "Deployed"
    action_timeout: float = Field(default=60.0, gt=0)
