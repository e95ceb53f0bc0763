import logging
from collections import defaultdict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roach_reports.models.building import Building
from roach_reports.models.report import Report, ReportImage
from roach_reports.schemas.building import BuildingResponse, BuildingStats
from roach_reports.schemas.report import ReportImageResponse, ReportResponse, ReportSummary
from roach_reports.services.places import PlacesClient
from roach_reports.services.stats import aggregate_report_stats, building_status
from roach_reports.utils.exceptions import UpstreamFailure

logger = logging.getLogger(__name__)


async def find_building_by_address(db: AsyncSession, address: str) -> Building | None:
    """Case-insensitive exact match on the street address."""
    result = await db.execute(
        select(Building)
        .where(func.lower(Building.address) == address.strip().lower())
        .limit(1)
    )
    return result.scalars().first()


async def create_building(
    db: AsyncSession,
    places: PlacesClient,
    address: str,
    city: str | None = None,
    state: str | None = None,
    zip: str | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
) -> Building:
    if latitude is None and longitude is None and places.enabled:
        try:
            coordinates = await places.geocode(address)
        except UpstreamFailure as e:
            # Don't block the submission, store the building without coordinates
            logger.warning("Geocoding failed for %r: %s", address, e.message)
            coordinates = None
        if coordinates is not None:
            latitude, longitude = coordinates

    building = Building(address=address.strip(), zip=zip, latitude=latitude, longitude=longitude)
    if city is not None:
        building.city = city
    if state is not None:
        building.state = state

    db.add(building)
    await db.commit()
    await db.refresh(building)
    logger.info("Created building %s at %r", building.id, building.address)
    return building


async def load_reports(db: AsyncSession, building_ids: list[str]) -> dict[str, list[Report]]:
    """Reports grouped by building id, newest first."""
    grouped: dict[str, list[Report]] = defaultdict(list)
    if not building_ids:
        return grouped
    result = await db.execute(
        select(Report)
        .where(Report.building_id.in_(building_ids))
        .order_by(Report.created_at.desc())
    )
    for report in result.scalars().all():
        grouped[report.building_id].append(report)
    return grouped


async def load_images(db: AsyncSession, report_ids: list[str]) -> dict[str, list[ReportImage]]:
    grouped: dict[str, list[ReportImage]] = defaultdict(list)
    if not report_ids:
        return grouped
    result = await db.execute(
        select(ReportImage)
        .where(ReportImage.report_id.in_(report_ids))
        .order_by(ReportImage.created_at)
    )
    for image in result.scalars().all():
        grouped[image.report_id].append(image)
    return grouped


def building_list_item(building: Building, reports: list[Report]) -> dict:
    """Building as shown in search and map lists: report summaries plus status."""
    data = BuildingResponse.model_validate(building).model_dump()
    data["reports"] = [ReportSummary.model_validate(r).model_dump() for r in reports]
    data["status"] = building_status(reports)
    return data


async def building_list(db: AsyncSession, buildings: list[Building]) -> list[dict]:
    reports = await load_reports(db, [b.id for b in buildings])
    return [building_list_item(b, reports.get(b.id, [])) for b in buildings]


async def building_detail(db: AsyncSession, building: Building) -> dict:
    reports = (await load_reports(db, [building.id])).get(building.id, [])
    images = await load_images(db, [r.id for r in reports])

    reports_list = []
    for report in reports:
        item = ReportResponse.model_validate(report).model_dump()
        item["report_images"] = [
            ReportImageResponse.model_validate(i).model_dump() for i in images.get(report.id, [])
        ]
        reports_list.append(item)

    data = BuildingResponse.model_validate(building).model_dump()
    data["reports"] = reports_list
    data["stats"] = BuildingStats(**aggregate_report_stats(reports)).model_dump()
    return data
