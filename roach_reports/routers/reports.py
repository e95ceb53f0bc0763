import logging
import math

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roach_reports.config import settings
from roach_reports.database import get_db
from roach_reports.models.building import Building
from roach_reports.models.report import Report, ReportImage
from roach_reports.schemas.building import BuildingResponse
from roach_reports.schemas.report import (
    ReportCreate,
    ReportImageCreate,
    ReportImageResponse,
    ReportResponse,
)
from roach_reports.services.buildings import create_building, find_building_by_address, load_images
from roach_reports.services.places import PlacesClient, get_places_client
from roach_reports.utils.exceptions import InvalidArgument, NotFound
from roach_reports.utils.response import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])

MAX_PAGE_SIZE = 100


def _building_summary(building: Building | None) -> dict | None:
    if building is None:
        return None
    data = BuildingResponse.model_validate(building).model_dump()
    return {k: data[k] for k in ("id", "address", "city", "state", "zip")}


@router.get("")
async def list_reports(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
):
    if limit is None:
        limit = settings.reports_page_size
    offset = (page - 1) * limit

    total = (await db.execute(select(func.count()).select_from(Report))).scalar_one()

    result = await db.execute(
        select(Report, Building)
        .join(Building, Report.building_id == Building.id)
        .order_by(Report.created_at.desc(), Report.id)
        .offset(offset)
        .limit(limit)
    )
    rows = result.all()
    images = await load_images(db, [report.id for report, _ in rows])

    reports = []
    for report, building in rows:
        item = ReportResponse.model_validate(report).model_dump()
        item["building"] = _building_summary(building)
        item["report_images"] = [
            ReportImageResponse.model_validate(i).model_dump() for i in images.get(report.id, [])
        ]
        reports.append(item)

    return success_response(data={
        "reports": reports,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit),
        },
    })


@router.post("", status_code=201)
async def create_report(
    payload: ReportCreate,
    db: AsyncSession = Depends(get_db),
    places: PlacesClient = Depends(get_places_client),
):
    building = None
    if payload.building_id:
        building = await db.get(Building, payload.building_id)
        if not building:
            raise NotFound("Building not found")
    elif payload.address and payload.address.strip():
        building = await find_building_by_address(db, payload.address)
        if building is None:
            building = await create_building(
                db,
                places,
                address=payload.address,
                latitude=payload.latitude,
                longitude=payload.longitude,
            )

    if building is None:
        raise InvalidArgument("building_id or address is required")

    report = Report(
        building_id=building.id,
        unit_number=payload.unit_number,
        has_roaches=payload.has_roaches,
        severity=payload.severity if payload.has_roaches else None,
        notes=payload.notes,
    )
    db.add(report)
    await db.commit()
    await db.refresh(report)
    logger.info(
        "Created report %s for building %s (has_roaches=%s)",
        report.id, building.id, report.has_roaches,
    )

    data = ReportResponse.model_validate(report).model_dump()
    data["building"] = _building_summary(building)
    return success_response(data=data)


@router.post("/{report_id}/images", status_code=201)
async def add_report_image(
    report_id: str,
    payload: ReportImageCreate,
    db: AsyncSession = Depends(get_db),
):
    if not payload.image_url.strip():
        raise InvalidArgument("image_url is required")

    report = await db.get(Report, report_id)
    if not report:
        raise NotFound("Report not found")

    image = ReportImage(report_id=report_id, image_url=payload.image_url.strip())
    db.add(image)
    await db.commit()
    await db.refresh(image)
    logger.info("Attached image %s to report %s", image.id, report_id)

    return success_response(data=ReportImageResponse.model_validate(image).model_dump())
