"""Integration tests for API endpoints using Starlette TestClient."""

import pytest
from starlette.testclient import TestClient

from tastydiet.main import create_app


@pytest.fixture
def client():
    """Create test client."""
    app = create_app()
    return TestClient(app)


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_200(self, client):
        """Health endpoint returns 200 OK."""
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_returns_json(self, client):
        """Health endpoint returns JSON with status."""
        response = client.get("/health")
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "tastydiet-planner"


class TestCORS:
    """Tests for CORS configuration."""

    def test_cors_preflight_localhost(self, client):
        """CORS preflight from the dev frontend is allowed."""
        response = client.options(
            "/health",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "GET",
            }
        )
        assert response.status_code == 200
        assert response.headers.get("access-control-allow-origin") == "http://localhost:5173"

    def test_cors_unknown_origin(self, client):
        """Origins outside the configured list get no CORS header."""
        response = client.get("/health", headers={"Origin": "https://evil.example"})
        assert response.headers.get("access-control-allow-origin") is None

    def test_cors_origins_from_env(self, monkeypatch):
        """CORS_ORIGINS replaces the default origin list."""
        monkeypatch.setenv("CORS_ORIGINS", "https://tastydiet.example, http://localhost:3000")
        client = TestClient(create_app())

        response = client.get("/health", headers={"Origin": "https://tastydiet.example"})
        assert response.headers.get("access-control-allow-origin") == "https://tastydiet.example"

        response = client.get("/health", headers={"Origin": "http://localhost:5173"})
        assert response.headers.get("access-control-allow-origin") is None
