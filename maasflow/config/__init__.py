"""Configuration for maas-flow."""
from maasflow.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
