import pytest
from httpx import AsyncClient, ASGITransport
from roach_reports.main import app


@pytest.mark.asyncio
async def test_health_endpoint():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    assert data["data"]["service"] == "roach-reports-api"
    assert data["data"]["version"] == "0.1.0"
    assert data["message"] is None


@pytest.mark.asyncio
async def test_root_lists_routes():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/")

    assert response.status_code == 200
    routes = response.json()["data"]["available_routes"]
    assert "GET /buildings/nearby?lat=&lng=&radius=" in routes
    assert "POST /reports/{id}/images" in routes
