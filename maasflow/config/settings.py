"""Application settings using Pydantic."""
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from maasflow.core.options import (
    HOST_EMPTY_POLICY,
    ZONE_EMPTY_POLICY,
    EmptyFilterPolicy,
    FilterOptions,
    ProcessingOptions,
)


# Nested sections are plain models: they are only read through the
# MAASFLOW_<SECTION>__<FIELD> variables of Settings.
class MaasSettings(BaseModel):
    """MAAS server connection settings."""
    url: str = "http://localhost/MAAS"
    # consumer_key:token_key:token_secret, as printed by `maas apikey`
    api_key: str | None = None
    api_version: str = "1.0"
    timeout: float = 30.0


class FilterSettings(BaseModel):
    """Include/exclude regular expressions for one node attribute."""
    include: list[str] = []
    exclude: list[str] = []
    empty_policy: EmptyFilterPolicy = HOST_EMPTY_POLICY

    def to_options(self) -> FilterOptions:
        return FilterOptions(
            include=tuple(self.include),
            exclude=tuple(self.exclude),
            empty_policy=self.empty_policy,
        )


class HostFilterSettings(FilterSettings):
    """Hostname filter: every host passes when no include pattern is set."""
    empty_policy: EmptyFilterPolicy = HOST_EMPTY_POLICY


class ZoneFilterSettings(FilterSettings):
    """Zone filter: no zone passes when no include pattern is set."""
    empty_policy: EmptyFilterPolicy = ZONE_EMPTY_POLICY


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_prefix="MAASFLOW_",
        env_nested_delimiter="__",
    )

    debug: bool = False
    verbose: bool = False
    preview: bool = False

    # Lifecycle state every selected node is driven toward
    target_state: str = "Deployed"

    # Seconds between batch runs (0 = run once and exit)
    period: float = 0.0

    # Seconds to wait for launched actions before cancelling them
    action_timeout: float = 60.0

    maas: MaasSettings = Field(default_factory=MaasSettings)
    hosts: HostFilterSettings = Field(default_factory=HostFilterSettings)
    zones: ZoneFilterSettings = Field(default_factory=ZoneFilterSettings)

    def processing_options(self) -> ProcessingOptions:
        """Build the immutable options for a batch run."""
        return ProcessingOptions(
            hosts=self.hosts.to_options(),
            zones=self.zones.to_options(),
            verbose=self.verbose,
            preview=self.preview,
            target_state=self.target_state,
            action_timeout=self.action_timeout,
        )


settings = Settings()
