import uuid

import pytest
from httpx import ASGITransport, AsyncClient

from roach_reports.main import app
from roach_reports.seed import SEED_BUILDINGS


def _unique_address(prefix="Test St"):
    return f"{uuid.uuid4().hex[:8]} {prefix}"


@pytest.mark.asyncio
async def test_search_requires_two_characters():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/buildings/search", params={"q": "a"})

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == "error"
    assert body["error"] == "Search query must be at least 2 characters"


@pytest.mark.asyncio
async def test_search_without_query():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/buildings/search")

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_search_matches_substring_case_insensitive():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/buildings/search", params={"q": "broad"})

    assert response.status_code == 200
    data = response.json()["data"]
    match = next(b for b in data if b["id"] == SEED_BUILDINGS[0]["id"])
    assert match["address"] == "250 Broadway"
    assert len(match["reports"]) == 2
    assert set(match["reports"][0]) == {"id", "has_roaches", "severity", "created_at"}
    # Only sighting is from early 2025
    assert match["status"] == "orange"


@pytest.mark.asyncio
async def test_nearby_requires_lat_and_lng():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/buildings/nearby", params={"lat": 40.7128})

    assert response.status_code == 400
    assert response.json()["error"] == "lat and lng are required"


@pytest.mark.asyncio
async def test_nearby_returns_buildings_inside_radius():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get(
            "/buildings/nearby",
            params={"lat": 40.7128, "lng": -74.0060, "radius": 1000},
        )

    assert response.status_code == 200
    ids = {b["id"] for b in response.json()["data"]}
    assert SEED_BUILDINGS[0]["id"] in ids
    assert SEED_BUILDINGS[1]["id"] in ids
    assert SEED_BUILDINGS[2]["id"] not in ids
    assert SEED_BUILDINGS[3]["id"] not in ids


@pytest.mark.asyncio
async def test_nearby_default_radius():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/buildings/nearby", params={"lat": 40.7128, "lng": -74.0060})

    assert response.status_code == 200
    building = next(b for b in response.json()["data"] if b["id"] == SEED_BUILDINGS[1]["id"])
    assert building["status"] == "gray"
    assert building["reports"] == []


@pytest.mark.asyncio
async def test_nearby_rejects_pole_adjacent_center():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get(
            "/buildings/nearby",
            params={"lat": 89.95, "lng": 0, "radius": 1000},
        )

    assert response.status_code == 400
    assert response.json()["status"] == "error"


@pytest.mark.asyncio
async def test_nearby_rejects_non_positive_radius():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get(
            "/buildings/nearby",
            params={"lat": 40.7128, "lng": -74.0060, "radius": 0},
        )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_nearby_rejects_non_numeric_lat():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/buildings/nearby", params={"lat": "north", "lng": -74.0})

    assert response.status_code == 400
    assert response.json()["error"].startswith("lat:")


@pytest.mark.asyncio
async def test_get_building_with_stats():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get(f"/buildings/{SEED_BUILDINGS[0]['id']}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["address"] == "250 Broadway"
    assert data["stats"] == {
        "totalReports": 2,
        "positiveReports": 1,
        "percentPositive": 50,
        "avgSeverity": 1.5,
    }
    assert all("report_images" in r for r in data["reports"])


@pytest.mark.asyncio
async def test_get_building_without_reports():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get(f"/buildings/{SEED_BUILDINGS[3]['id']}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["latitude"] is None
    assert data["stats"] == {
        "totalReports": 0,
        "positiveReports": 0,
        "percentPositive": 0,
        "avgSeverity": 0.0,
    }


@pytest.mark.asyncio
async def test_get_building_not_found():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/buildings/nonexistent")

    assert response.status_code == 404
    assert response.json()["error"] == "Building not found"


@pytest.mark.asyncio
async def test_create_building_then_return_existing():
    address = _unique_address()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        created = await client.post(
            "/buildings",
            json={"address": address, "zip": "11201", "latitude": 40.69, "longitude": -73.99},
        )
        again = await client.post("/buildings", json={"address": address.upper()})

    assert created.status_code == 201
    data = created.json()["data"]
    assert data["city"] == "New York"
    assert data["state"] == "NY"
    assert data["zip"] == "11201"

    assert again.status_code == 200
    assert again.json()["data"]["id"] == data["id"]


@pytest.mark.asyncio
async def test_create_building_requires_address():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        missing = await client.post("/buildings", json={"city": "Brooklyn"})
        blank = await client.post("/buildings", json={"address": "   "})

    assert missing.status_code == 400
    assert missing.json()["error"] == "address is required"
    assert blank.status_code == 400
    assert blank.json()["error"] == "address is required"


@pytest.mark.asyncio
async def test_create_building_rejects_unknown_fields():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/buildings",
            json={"address": _unique_address(), "floors": 6},
        )

    assert response.status_code == 400
    assert response.json()["error"].startswith("floors:")


@pytest.mark.asyncio
async def test_create_building_requires_coordinate_pair():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/buildings",
            json={"address": _unique_address(), "latitude": 40.7},
        )

    assert response.status_code == 400
    assert response.json()["error"] == "latitude and longitude must be provided together"
