"""Tests for observability: metrics endpoint, health check, request logging middleware."""

from netcompiler.api.deps import get_store
from netcompiler.observability.metrics import COMPILATIONS_TOTAL, HTTP_REQUESTS_TOTAL
from netcompiler.services.artifact_store import ArtifactStore


class TestMetricsEndpoint:
    async def test_metrics_returns_prometheus_format(self, client):
        resp = await client.get("/metrics")
        assert resp.status_code == 200
        assert "text/plain" in resp.headers["content-type"]
        assert "nc_" in resp.text

    async def test_compilation_counter(self, client, payload):
        before = COMPILATIONS_TOTAL.labels(result="ok")._value.get()
        await client.post("/api/v1/projects/compile", json=payload, headers={"id": "u1"})
        assert COMPILATIONS_TOTAL.labels(result="ok")._value.get() == before + 1


class TestHealthCheck:
    async def test_health_ok(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["dependencies"]["artifact_root"]["status"] == "ok"

    async def test_health_degraded_when_root_unwritable(self, app, client, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        app.dependency_overrides[get_store] = lambda: ArtifactStore(blocker / "artifacts")

        resp = await client.get("/health")
        assert resp.status_code == 503
        assert resp.json()["status"] == "degraded"


class TestRequestLoggingMiddleware:
    async def test_request_id_header_present(self, client):
        resp = await client.get("/metrics")
        assert "x-request-id" in resp.headers
        assert len(resp.headers["x-request-id"]) == 8

    async def test_metrics_incremented_after_request(self, client):
        await client.get("/api/v1/layers")
        metric_value = HTTP_REQUESTS_TOTAL.labels(method="GET", path="/api/v1/layers", status_code="200")
        assert metric_value._value.get() >= 1
