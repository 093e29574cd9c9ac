"""
Tests for health check endpoint.
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from addonhub.api.v1.health import router

app = FastAPI()
app.include_router(router, prefix="/v1/health")
client = TestClient(app)


class TestHealthEndpoint:
    """Tests for the /v1/health endpoint."""

    def test_health_returns_200(self):
        response = client.get("/v1/health")
        assert response.status_code == 200

    def test_health_returns_description(self):
        data = client.get("/v1/health").json()
        assert data == {"description": "Service reachable."}
