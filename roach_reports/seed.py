import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roach_reports.models.building import Building
from roach_reports.models.report import Report


def _seed_id(name: str) -> str:
    return str(uuid.uuid5(uuid.NAMESPACE_DNS, name))


SEED_BUILDINGS = [
    {"id": _seed_id("building-broadway-250"), "address": "250 Broadway", "zip": "10007",
     "latitude": 40.7128, "longitude": -74.0060},
    {"id": _seed_id("building-chambers-100"), "address": "100 Chambers St", "zip": "10007",
     "latitude": 40.7150, "longitude": -74.0100},
    {"id": _seed_id("building-w-125th-55"), "address": "55 W 125th St", "zip": "10027",
     "latitude": 40.8075, "longitude": -73.9446},
    {"id": _seed_id("building-no-geocode"), "address": "12 Unmapped Ave", "zip": None,
     "latitude": None, "longitude": None},
]

SEED_REPORTS = [
    {"id": _seed_id("report-broadway-1"), "building_id": SEED_BUILDINGS[0]["id"],
     "unit_number": "4B", "has_roaches": True, "severity": 3,
     "notes": "Seen in the kitchen at night", "created_at": "2025-01-10T12:00:00+00:00"},
    {"id": _seed_id("report-broadway-2"), "building_id": SEED_BUILDINGS[0]["id"],
     "unit_number": "2A", "has_roaches": False, "severity": None,
     "notes": None, "created_at": "2025-02-01T09:30:00+00:00"},
]


async def seed_data(session: AsyncSession) -> None:
    result = await session.execute(select(Building).limit(1))
    if result.scalars().first() is not None:
        return

    for b in SEED_BUILDINGS:
        session.add(Building(**b))
    await session.flush()

    for r in SEED_REPORTS:
        session.add(Report(**r))

    await session.commit()
