from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roach_reports.config import settings
from roach_reports.database import get_db
from roach_reports.models.building import Building
from roach_reports.schemas.building import BuildingCreate, BuildingResponse
from roach_reports.services.buildings import (
    building_detail,
    building_list,
    create_building,
    find_building_by_address,
)
from roach_reports.services.geo import bounding_box, filter_within
from roach_reports.services.places import PlacesClient, get_places_client
from roach_reports.utils.exceptions import InvalidArgument, NotFound
from roach_reports.utils.response import success_response

router = APIRouter(prefix="/buildings", tags=["buildings"])


@router.get("/search")
async def search_buildings(
    q: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    query = (q or "").strip()
    if len(query) < settings.search_min_length:
        raise InvalidArgument(
            f"Search query must be at least {settings.search_min_length} characters"
        )

    result = await db.execute(
        select(Building)
        .where(Building.address.ilike(f"%{query}%"))
        .limit(settings.search_max_results)
    )
    buildings = list(result.scalars().all())
    return success_response(data=await building_list(db, buildings))


@router.get("/nearby")
async def nearby_buildings(
    lat: float | None = Query(default=None),
    lng: float | None = Query(default=None),
    radius: float | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    if radius is None:
        radius = settings.nearby_default_radius_meters
    box = bounding_box(lat, lng, radius)

    result = await db.execute(
        select(Building)
        .where(
            Building.latitude.is_not(None),
            Building.longitude.is_not(None),
            Building.latitude >= box.min_lat,
            Building.latitude <= box.max_lat,
            Building.longitude >= box.min_lng,
            Building.longitude <= box.max_lng,
        )
        .limit(settings.nearby_max_results)
    )
    buildings = filter_within(result.scalars().all(), box, settings.nearby_max_results)
    return success_response(data=await building_list(db, buildings))


@router.get("/{building_id}")
async def get_building(building_id: str, db: AsyncSession = Depends(get_db)):
    building = await db.get(Building, building_id)
    if not building:
        raise NotFound("Building not found")
    return success_response(data=await building_detail(db, building))


@router.post("")
async def create_or_get_building(
    payload: BuildingCreate,
    db: AsyncSession = Depends(get_db),
    places: PlacesClient = Depends(get_places_client),
):
    if not payload.address.strip():
        raise InvalidArgument("address is required")

    existing = await find_building_by_address(db, payload.address)
    if existing:
        return success_response(data=BuildingResponse.model_validate(existing).model_dump())

    building = await create_building(
        db,
        places,
        address=payload.address,
        city=payload.city,
        state=payload.state,
        zip=payload.zip,
        latitude=payload.latitude,
        longitude=payload.longitude,
    )
    return JSONResponse(
        status_code=201,
        content=success_response(data=BuildingResponse.model_validate(building).model_dump()),
    )
