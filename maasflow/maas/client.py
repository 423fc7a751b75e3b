"""Client for the MAAS inventory and control API.

This module provides the MaasClient class that handles:
- OAuth 1.0 PLAINTEXT request signing from a MAAS API key
- Listing the node inventory
- The three node operations used by the lifecycle actions: start,
  acquire and commission
"""
import logging
import time
import uuid
from typing import Any

import httpx

from maasflow.maas.models import MaasNode

logger = logging.getLogger(__name__)


class MaasClientError(Exception):
    """Raised when a call to the MAAS API fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


def parse_api_key(api_key: str) -> tuple[str, str, str]:
    """Split a MAAS API key into consumer key, token key and token secret.

    Raises:
        MaasClientError: If the key is not of the form ``a:b:c``
    """
    parts = api_key.split(":")
    if len(parts) != 3 or not all(parts[:2]):
        raise MaasClientError(
            "Invalid MAAS API key, expected '<consumer>:<token>:<secret>'"
        )
    return parts[0], parts[1], parts[2]


class MaasClient:
    """Async client for the MAAS REST API."""

    def __init__(
        self,
        url: str,
        api_key: str,
        api_version: str = "1.0",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the MAAS client.

        Args:
            url: Base URL of the MAAS server (e.g., http://maas.example.com/MAAS)
            api_key: MAAS API key in ``consumer:token:secret`` form
            api_version: API version segment of the URL
            timeout: HTTP request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.url = url.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout
        self._consumer_key, self._token_key, self._token_secret = parse_api_key(api_key)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def api_root(self) -> str:
        return f"{self.url}/api/{self.api_version}"

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "MaasClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def _auth_header(self) -> str:
        """Build a PLAINTEXT OAuth 1.0 header with a fresh nonce."""
        params = {
            "oauth_version": "1.0",
            "oauth_signature_method": "PLAINTEXT",
            "oauth_consumer_key": self._consumer_key,
            "oauth_token": self._token_key,
            "oauth_signature": f"&{self._token_secret}",
            "oauth_nonce": uuid.uuid4().hex,
            "oauth_timestamp": str(int(time.time())),
        }
        return "OAuth " + ", ".join(f'{k}="{v}"' for k, v in params.items())

    async def _request(
        self,
        method: str,
        path: str,
        op: str,
        data: dict[str, str] | None = None,
    ) -> httpx.Response:
        client = self._get_client()
        url = f"{self.api_root}/{path}"

        try:
            response = await client.request(
                method,
                url,
                params={"op": op},
                data=data,
                headers={"Authorization": self._auth_header()},
            )
        except httpx.RequestError as e:
            raise MaasClientError(f"Connection error calling {op} on {url}: {e}")

        if response.status_code >= 400:
            raise MaasClientError(
                f"MAAS {op} on {path} failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )
        return response

    async def list_nodes(self) -> list[MaasNode]:
        """Fetch the full node inventory.

        Raises:
            MaasClientError: If the request fails or the body is not a list
        """
        response = await self._request("GET", "nodes/", "list")
        try:
            payload: Any = response.json()
        except ValueError as e:
            raise MaasClientError(f"Invalid node list response: {e}")
        if not isinstance(payload, list):
            raise MaasClientError("Invalid node list response: expected a JSON list")

        nodes = [MaasNode.from_json(item) for item in payload if isinstance(item, dict)]
        logger.debug(f"Fetched {len(nodes)} nodes from {self.url}")
        return nodes

    async def start(self, system_id: str) -> None:
        """Ask MAAS to deploy (start) an allocated node."""
        await self._request("POST", f"nodes/{system_id}/", "start")

    async def acquire(self, hostname: str) -> None:
        """Allocate the node with the given hostname to this API user."""
        await self._request("POST", "nodes/", "acquire", data={"name": hostname})

    async def commission(self, system_id: str) -> None:
        """Start commissioning a node."""
        await self._request("POST", f"nodes/{system_id}/", "commission", data={})
