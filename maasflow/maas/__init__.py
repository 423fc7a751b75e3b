"""MAAS API client and node records."""
from maasflow.maas.client import MaasClient, MaasClientError
from maasflow.maas.models import MaasNode, StatusReadError

__all__ = ["MaasClient", "MaasClientError", "MaasNode", "StatusReadError"]
