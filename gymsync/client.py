"""
Gym Sync - Business Units Client

Async HTTP client for one resource collection of the BRP API
(``/api/ver3/businessunits`` by default).

Features:
- Async HTTP client with connection pooling
- Endpoint construction for collection and item URLs
- Response normalization (JSON decoding, wrapped collections)
- Every HTTP or network failure surfaces as a TransportError

The client never retries. Retrying is left to the caller.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from .errors import TransportError
from .models import Record

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://boulders.brpsystems.com/apiserver"
DEFAULT_RESOURCE_PATH = "/api/ver3/businessunits"

# Keys some deployments wrap the collection in
COLLECTION_KEYS = ("items", "businessUnits", "data")


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class ClientConfig:
    """Configuration for the business units client."""

    base_url: str = DEFAULT_BASE_URL
    resource_path: str = DEFAULT_RESOURCE_PATH
    timeout: float = 30.0  # Per request, seconds

    # Headers
    api_token: Optional[str] = None
    accept_language: Optional[str] = "da-DK"

    # Connection pool
    max_connections: int = 10

    def __post_init__(self):
        """Normalize URL parts so they join with exactly one slash."""
        self.base_url = self.base_url.rstrip("/")
        path = self.resource_path.strip()
        if not path.startswith("/"):
            path = f"/{path}"
        self.resource_path = path.rstrip("/")

    @property
    def endpoint(self) -> str:
        """Collection URL."""
        return f"{self.base_url}{self.resource_path}"


# =============================================================================
# Client
# =============================================================================

class BusinessUnitsClient:
    """List, create, update and delete business units on the remote API."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or ClientConfig()
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    @property
    def endpoint(self) -> str:
        return self.config.endpoint

    def item_url(self, identifier: Any) -> str:
        """URL of a single record."""
        return f"{self.endpoint}/{identifier}"

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                limits=httpx.Limits(
                    max_keepalive_connections=5,
                    max_connections=self.config.max_connections,
                ),
                headers=self._default_headers(),
                transport=self._transport,
            )
        return self._http_client

    def _default_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.config.accept_language:
            headers["Accept-Language"] = self.config.accept_language
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"
        return headers

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()
        logger.debug("Business units client closed")

    async def __aenter__(self) -> "BusinessUnitsClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        url: str,
        **kwargs,
    ) -> httpx.Response:
        """Send one request; translate any failure into TransportError."""
        client = await self._get_http_client()
        logger.debug(f"{method} {url}")

        try:
            request = client.build_request(method, url, **kwargs)
        except (TypeError, ValueError) as e:
            # Body not JSON-serializable; nothing was sent
            raise TransportError(
                f"Could not encode request body: {e}",
                endpoint=url,
                method=method,
            ) from e

        try:
            response = await client.send(request)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request timed out after {self.config.timeout}s: {method} {url}",
                endpoint=url,
                method=method,
            ) from e
        except httpx.RequestError as e:
            raise TransportError(
                f"Network error: {e}",
                endpoint=url,
                method=method,
            ) from e

        logger.debug(f"{method} {url} - {response.status_code}")

        if not response.is_success:
            raise TransportError(
                f"HTTP error! status: {response.status_code}",
                endpoint=url,
                status_code=response.status_code,
                method=method,
                payload=_error_payload(response),
            )

        return response

    def _decode(self, response: httpx.Response, method: str) -> Any:
        """Decode a successful response body. Empty bodies decode to None."""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"API returned non-JSON response. Status: {response.status_code}",
                endpoint=str(response.request.url),
                status_code=response.status_code,
                method=method,
                payload=response.text,
            ) from e

    # === Collection Operations ===

    async def list(self) -> list[Record]:
        """
        Fetch the full current collection.

        Returns:
            List of business unit records

        Raises:
            TransportError: on non-2xx status, network failure or a body
                that is not a collection
        """
        response = await self._request("GET", self.endpoint)
        data = self._decode(response, "GET")
        items = _extract_items(data)

        if items is None:
            raise TransportError(
                f"Expected a collection from {self.endpoint}, got {type(data).__name__}",
                endpoint=self.endpoint,
                status_code=response.status_code,
                method="GET",
                payload=data,
            )

        logger.debug(f"Fetched {len(items)} business units")
        return items

    async def create(self, record: Record) -> Any:
        """Submit a new record; returns the server representation."""
        response = await self._request("POST", self.endpoint, json=record)
        return self._decode(response, "POST")

    async def update(self, identifier: Any, record: Record) -> Any:
        """Replace the record identified by ``identifier``."""
        response = await self._request("PUT", self.item_url(identifier), json=record)
        return self._decode(response, "PUT")

    async def delete(self, identifier: Any) -> bool:
        """Remove the record identified by ``identifier``."""
        await self._request("DELETE", self.item_url(identifier))
        logger.info(f"Deleted business unit {identifier}")
        return True


# =============================================================================
# Helpers
# =============================================================================

def _extract_items(data: Any) -> Optional[list]:
    """Return the collection from a bare or wrapped list payload."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in COLLECTION_KEYS:
            items = data.get(key)
            if isinstance(items, list):
                return items
    return None


def _error_payload(response: httpx.Response) -> Any:
    """Body of an error response, JSON when it parses."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


# =============================================================================
# Convenience Functions
# =============================================================================

@asynccontextmanager
async def client_session(
    config: Optional[ClientConfig] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
):
    """
    Context manager for a client session.

    Usage:
        async with client_session() as client:
            gyms = await client.list()
    """
    client = BusinessUnitsClient(config, transport=transport)
    try:
        yield client
    finally:
        await client.close()
