"""
API Backend Tests

Tests for FastAPI endpoints, schemas, and core functionality.
"""

import pytest

from conftest import FakeRemote


# Test imports work
def test_api_imports():
    """Test that all API modules can be imported without errors."""
    from api.main import app
    from api.core.config import Settings
    from api.routes.gyms import get_catalog, get_client
    from api.models.schemas import SyncReportResponse, BusinessUnit

    assert app is not None
    assert Settings is not None


def test_settings_defaults():
    """Test that settings have sensible defaults."""
    from api.core.config import Settings

    settings = Settings()
    assert settings.app_name == "Gym Sync API"
    assert settings.environment in ["development", "staging", "production"]
    assert settings.sync_max_concurrency >= 1
    assert settings.brp_api_timeout > 0


def test_settings_origins_from_string():
    """Test that comma-separated origins are split."""
    from api.core.config import Settings

    settings = Settings(allowed_origins="http://a.test, http://b.test")
    assert settings.allowed_origins == ["http://a.test", "http://b.test"]


def test_settings_reject_invalid_limits():
    """Test that timeouts and concurrency must be positive."""
    from api.core.config import Settings
    from pydantic import ValidationError

    with pytest.raises(ValidationError):
        Settings(brp_api_timeout=0)

    with pytest.raises(ValidationError):
        Settings(sync_max_concurrency=0)


def test_settings_client_config():
    """Test that settings produce a client configuration."""
    from api.core.config import Settings

    settings = Settings(
        brp_api_base_url="https://brp.test/apiserver/",
        brp_api_token="token",
    )
    config = settings.client_config()

    assert config.endpoint == "https://brp.test/apiserver/api/ver3/businessunits"
    assert config.api_token == "token"
    assert config.accept_language == "da-DK"


def test_business_unit_schema():
    """Test BusinessUnit schema accepts catalog records."""
    from api.models.schemas import BusinessUnit
    from gymsync.catalog import GYM_CATALOG

    unit = BusinessUnit(**GYM_CATALOG[1])
    assert unit.name == "Boulders Aarhus"
    assert unit.address.city == "Åbyhøj"
    assert unit.region.id == 2


class TestAPIEndpoints:
    """Test API endpoint responses."""

    @pytest.fixture
    def remote(self, catalog):
        return FakeRemote(catalog[:3])

    @pytest.fixture
    def client(self, remote):
        """Create test client wired to an in-memory remote."""
        from fastapi.testclient import TestClient
        from api.main import app
        from api.routes.gyms import get_catalog, get_client
        from gymsync.catalog import default_catalog

        async def override_client():
            async with remote.client() as client:
                yield client

        app.dependency_overrides[get_client] = override_client
        app.dependency_overrides[get_catalog] = default_catalog
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_health_endpoint(self, client):
        """Test health check endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert data["upstream"].endswith("/api/ver3/businessunits")

    def test_root_endpoint(self, client):
        """Test root endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Gym Sync API"
        assert data["endpoints"]["sync"] == "/api/v1/gyms/sync"

    def test_process_time_header(self, client):
        """Test timing middleware adds its header."""
        response = client.get("/health")
        assert "x-process-time" in response.headers

    def test_openapi_schema(self, client):
        """Test OpenAPI schema is generated."""
        response = client.get("/api/openapi.json")
        assert response.status_code == 200
        schema = response.json()
        assert "openapi" in schema
        assert "/api/v1/gyms/sync" in schema["paths"]
        assert "info" in schema

    def test_catalog_endpoint(self, client):
        """Test local catalog listing."""
        response = client.get("/api/v1/gyms/catalog")
        assert response.status_code == 200
        assert len(response.json()) == 10

    def test_catalog_endpoint_returns_records_as_loaded(self, client):
        """Test a catalog with malformed values is listed, not rejected."""
        from api.main import app
        from api.routes.gyms import get_catalog

        malformed = [{"id": "abc", "name": "Broken", "address": {"latitude": 123.0}}]
        app.dependency_overrides[get_catalog] = lambda: malformed

        response = client.get("/api/v1/gyms/catalog")
        assert response.status_code == 200
        assert response.json() == malformed

    def test_validate_endpoint(self, client, sample_record):
        """Test record validation."""
        response = client.post("/api/v1/gyms/validate", json=sample_record)
        assert response.status_code == 200
        assert response.json() == {"valid": True, "errors": []}

        sample_record["location"] = "dk"
        response = client.post("/api/v1/gyms/validate", json=sample_record)
        assert response.json()["valid"] is False

    def test_sync_catalog(self, client, remote):
        """Test a sync pass over the configured catalog."""
        response = client.post("/api/v1/gyms/sync")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["created"] == 7
        assert data["updated"] == 3
        assert [o["identifier"] for o in data["outcomes"]] == list(range(1, 11))

    def test_sync_reports_record_failures(self, client, remote):
        """Test per-record failures keep status 200."""
        remote.fail("PUT", 2, status=500)

        response = client.post("/api/v1/gyms/sync")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["failed"] == 1
        assert data["outcomes"][1]["action"] == "failed"
        assert data["outcomes"][1]["error_detail"]["status_code"] == 500

    def test_sync_snapshot_failure(self, client, remote):
        """Test a failed snapshot fails the call."""
        remote.fail("GET", status=503)

        response = client.post("/api/v1/gyms/sync")
        assert response.status_code == 502
        data = response.json()
        assert data["error"] == "SnapshotFailure"
        assert data["detail"]["status_code"] == 503
        assert remote.writes == []

    def test_sync_validate_first(self, client, remote, sample_record):
        """Test pre-flight validation of posted records."""
        sample_record["currency"] = ""

        response = client.post(
            "/api/v1/gyms/sync",
            json={"records": [sample_record], "validate_first": True},
        )
        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "ValidationError"
        assert data["detail"]["errors"] == ["Missing required fields: currency"]
        assert remote.calls == []

    def test_connection_endpoint(self, client):
        """Test connection probe."""
        response = client.get("/api/v1/gyms/connection")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["count"] == 3

    def test_search_endpoint(self, client):
        """Test text search."""
        response = client.get("/api/v1/gyms/search", params={"q": "AARHUS"})
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["results"][0]["id"] == 2

    def test_search_requires_query(self, client):
        """Test search rejects a missing query."""
        response = client.get("/api/v1/gyms/search")
        assert response.status_code == 422
        assert response.json()["error"] == "Validation Error"

    def test_get_gym(self, client):
        """Test lookup by id."""
        response = client.get("/api/v1/gyms/1")
        assert response.status_code == 200
        assert response.json()["record"]["name"] == "Boulders Copenhagen"

    def test_get_gym_not_found(self, client):
        """Test lookup of an unknown id."""
        response = client.get("/api/v1/gyms/99")
        assert response.status_code == 404
        assert response.json()["error"] == "Gym 99 not found"

    def test_upstream_failure_is_bad_gateway(self, client, remote):
        """Test transport errors surface as 502."""
        remote.fail("GET", status=500)

        response = client.get("/api/v1/gyms/1")
        assert response.status_code == 502
        assert response.json()["detail"]["error"] == "TransportError"

    def test_delete_gym(self, client, remote):
        """Test remote deletion."""
        response = client.delete("/api/v1/gyms/3")
        assert response.status_code == 200
        assert response.json() == {"identifier": 3, "deleted": True}
        assert [r["id"] for r in remote.records] == [1, 2]
