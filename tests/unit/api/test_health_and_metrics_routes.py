"""Unit tests for health and metrics endpoints."""

import pytest
from fastapi.testclient import TestClient

from talentproof.api.main import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


class TestHealthRoute:
    def test_health_memory_store(
        self,
        client: TestClient,
        monkeypatch: pytest.MonkeyPatch,
        project_version: str,
    ) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)

        response = client.get("/v1/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "version": project_version,
            "store": "memory",
        }

    def test_correlation_id_echoed(self, client: TestClient) -> None:
        response = client.get("/v1/health", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_malformed_correlation_id_replaced(self, client: TestClient) -> None:
        response = client.get(
            "/v1/health", headers={"X-Correlation-ID": "abc 123 forged=entry"}
        )
        echoed = response.headers["X-Correlation-ID"]
        assert echoed != "abc 123 forged=entry"
        assert len(echoed) == 36


class TestMetricsRoute:
    def test_exposition_uses_route_templates(self, client: TestClient) -> None:
        client.get("/v1/videos/some-video-id")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        body = response.text
        assert 'endpoint="/v1/videos/{video_id}"' in body
        assert "some-video-id" not in body
