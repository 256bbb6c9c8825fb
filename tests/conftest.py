"""
Pytest configuration and shared fixtures.

The remote business units API is faked in memory and served through
httpx.MockTransport, so no test touches the network.
"""

import copy
import json
from typing import Any, Optional

import httpx
import pytest
import pytest_asyncio

from gymsync.catalog import default_catalog
from gymsync.client import BusinessUnitsClient, ClientConfig

BASE_URL = "https://brp.test/apiserver"
ENDPOINT = f"{BASE_URL}/api/ver3/businessunits"


class FakeRemote:
    """In-memory business units collection with injectable failures."""

    def __init__(self, records: Optional[list[dict]] = None):
        self.records = copy.deepcopy(records or [])
        self.calls: list[tuple[str, Any]] = []
        self.bodies: list[Any] = []
        self.failures: dict[tuple[str, Any], int] = {}
        self.errors: dict[tuple[str, Any], Exception] = {}

    def fail(self, method: str, identifier: Any = None, status: int = 500) -> None:
        """Answer ``method`` on ``identifier`` with an error status."""
        self.failures[(method, identifier)] = status

    def raise_on(self, method: str, identifier: Any, error: Exception) -> None:
        """Raise a transport-level exception for ``method`` on ``identifier``."""
        self.errors[(method, identifier)] = error

    @property
    def writes(self) -> list[tuple[str, Any]]:
        return [call for call in self.calls if call[0] in ("POST", "PUT", "DELETE")]

    def handler(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        last = request.url.path.rstrip("/").rsplit("/", 1)[-1]
        identifier = None if last == "businessunits" else int(last)
        body = json.loads(request.content) if request.content else None
        if method == "POST" and isinstance(body, dict):
            identifier = body.get("id")

        self.calls.append((method, identifier))
        self.bodies.append(body)

        key = (method, identifier)
        if key in self.errors:
            raise self.errors[key]
        if key in self.failures:
            return httpx.Response(self.failures[key], json={"message": "Internal error"})

        if method == "GET":
            return httpx.Response(200, json=self.records)
        if method == "POST":
            self.records.append(body)
            return httpx.Response(201, json=body)
        if method == "PUT":
            self.records = [body if r.get("id") == identifier else r for r in self.records]
            return httpx.Response(200, json=body)
        if method == "DELETE":
            before = len(self.records)
            self.records = [r for r in self.records if r.get("id") != identifier]
            if len(self.records) == before:
                return httpx.Response(404, json={"message": "Not found"})
            return httpx.Response(204)
        return httpx.Response(405)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self, **config) -> BusinessUnitsClient:
        return BusinessUnitsClient(
            ClientConfig(base_url=BASE_URL, **config),
            transport=self.transport,
        )


@pytest.fixture
def sample_record() -> dict[str, Any]:
    """A fully valid gym record."""
    return {
        "id": 1,
        "name": "Boulders Copenhagen",
        "company": {"id": 1, "name": "Boulders Denmark"},
        "companyNameForInvoice": "Boulders Denmark A/S",
        "address": {
            "street": "Vesterbrogade 149",
            "city": "København V",
            "postalCode": "1620",
        },
        "location": "DK",
        "region": {"id": 1, "name": "Copenhagen Region"},
        "currency": "DKK",
    }


@pytest.fixture
def catalog() -> list[dict[str, Any]]:
    """The built-in ten gym catalog."""
    return default_catalog()


@pytest.fixture
def remote(catalog) -> FakeRemote:
    """Remote collection that already holds the first three gyms."""
    return FakeRemote(catalog[:3])


@pytest_asyncio.fixture
async def client(remote):
    """Client wired to the fake remote."""
    client = remote.client()
    yield client
    await client.close()
