"""Unit tests for observability endpoints."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from flashgen.core.database import db_manager
from flashgen.core.dependencies import RedisManager


@pytest.fixture
def system_client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


def _patch_health(monkeypatch: pytest.MonkeyPatch, *, db: bool, redis: bool) -> None:
    monkeypatch.setattr(db_manager, "health_check", AsyncMock(return_value=db))
    monkeypatch.setattr(RedisManager, "health_check", AsyncMock(return_value=redis))


class TestHealth:
    """Tests for /observability/health."""

    def test_healthy(self, system_client: TestClient, monkeypatch: pytest.MonkeyPatch):
        _patch_health(monkeypatch, db=True, redis=True)

        response = system_client.get("/observability/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert data["dependencies"] == {"postgres": "healthy", "redis": "healthy"}

    def test_unhealthy_dependency(
        self, system_client: TestClient, monkeypatch: pytest.MonkeyPatch
    ):
        _patch_health(monkeypatch, db=True, redis=False)

        data = system_client.get("/observability/health").json()

        assert data["status"] == "unhealthy"
        assert data["dependencies"]["redis"] == "unhealthy"

    def test_ready_reflects_database(
        self, system_client: TestClient, monkeypatch: pytest.MonkeyPatch
    ):
        _patch_health(monkeypatch, db=False, redis=True)

        assert system_client.get("/observability/ready").json() == {"ready": False}

    def test_live(self, system_client: TestClient):
        assert system_client.get("/observability/live").json() == {"alive": True}


def test_metrics_exposes_prometheus_text(system_client: TestClient):
    system_client.get("/observability/live")

    response = system_client.get("/observability/metrics")

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/plain")
    assert "flashgen_http_requests_total" in response.text
