import pytest

from conftest import api_headers
from relief_api.middleware.security import response_headers


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["database"] == "connected"


@pytest.mark.asyncio
async def test_security_headers_and_request_id(client):
    response = await client.get("/api/v1/session", headers=api_headers())

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Cache-Control"] == "no-store"
    assert response.headers["API-Version"] == "v1"
    assert "Strict-Transport-Security" not in response.headers
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_caller_request_id_is_echoed(client):
    response = await client.get("/api/v1/session", headers=api_headers(**{"X-Request-ID": "req-123"}))

    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/api/v1/nowhere", headers=api_headers())

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}


def test_hsts_only_in_production():
    assert "Strict-Transport-Security" in response_headers("production")
    assert "Strict-Transport-Security" not in response_headers("development")
    assert response_headers("testing")["Cache-Control"] == "no-store"
