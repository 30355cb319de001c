"""
Basic tests for the Fishing Log API.

This module contains tests for the application shell: root, health, docs and
route registration.
"""

from fishlog.config import settings


def test_root_endpoint(client):
    """Test the root endpoint returns correct response."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()

    for field in ["message", "version", "docs", "redoc"]:
        assert field in data
    assert "Fishing Log API" in data["message"]
    assert data["version"] == "1.0.0"


def test_health_endpoint(client):
    """Test the health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["cache"] == "disabled"


def test_openapi_docs_available(client):
    """Test that OpenAPI documentation is available."""
    assert client.get("/docs").status_code == 200
    assert client.get("/redoc").status_code == 200

    response = client.get("/api/v1/openapi.json")
    assert response.status_code == 200
    data = response.json()
    assert "/api/v1/entries" in data["paths"]
    assert "/api/v1/rivers/refresh" in data["paths"]


def test_protected_endpoints_require_auth(client):
    """Every resource endpoint rejects anonymous requests."""
    for path in [
        "/api/v1/auth/me",
        "/api/v1/auth/profile",
        "/api/v1/admin/stats",
        "/api/v1/entries",
        "/api/v1/rivers",
        "/api/v1/rivers/dashboard",
        "/api/v1/licenses",
        "/api/v1/conditions/moon-phase?date=2024-07-21",
    ]:
        response = client.get(path)
        assert response.status_code == 401, path
        assert response.json()["status_code"] == 401


def test_invalid_api_key_rejected(client):
    response = client.get("/api/v1/entries", headers={"X-API-Key": "invalid-key-12345"})
    assert response.status_code == 401
    assert "Invalid" in response.json()["detail"]


def test_cors_middleware_enabled(client):
    """Test that CORS middleware is enabled."""
    response = client.get("/", headers={"Origin": "http://localhost:3000"})
    assert response.status_code == 200
    cors_headers = [h for h in response.headers.keys() if h.startswith("access-control")]
    assert len(cors_headers) > 0


def test_configuration_loaded():
    """Test that configuration is loaded properly."""
    assert settings.API_V1_STR == "/api/v1"
    assert settings.RATE_LIMIT_ENABLED is False
    assert settings.INSTANTANEOUS_WINDOW_DAYS == 3
    assert settings.HOURLY_WINDOW_DAYS == 120
    assert settings.ALERT_COOLDOWN_MINUTES == 60
