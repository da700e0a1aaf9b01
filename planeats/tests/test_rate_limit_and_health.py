import pytest
from httpx import ASGITransport, AsyncClient

from planeats.api.api_run import create_app
from planeats.infra.Document_Store import DocumentStore
from planeats.logic.ai.service import AIService
from planeats.tests.helpers import make_client


def test_requests_over_the_limit_are_rejected(tmp_path):
    client = make_client(tmp_path, rate_limit="3/minute")
    statuses = [client.get("/api/health").status_code for _ in range(4)]
    assert statuses == [200, 200, 200, 429]


def test_limits_are_per_app(tmp_path):
    first = make_client(tmp_path / "a", rate_limit="1/minute")
    second = make_client(tmp_path / "b", rate_limit="1/minute")
    assert first.get("/api/health").status_code == 200
    assert second.get("/api/health").status_code == 200
    assert first.get("/api/health").status_code == 429


@pytest.mark.asyncio
async def test_health_over_asgi(tmp_path):
    app = create_app(store=DocumentStore(tmp_path), ai_service=AIService({"gemini": None, "openai": None}))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        resp = await ac.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.json()["timestamp"].endswith("Z")
