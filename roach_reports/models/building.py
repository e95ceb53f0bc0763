import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Float, Index, String

from roach_reports.database import Base


class Building(Base):
    __tablename__ = "buildings"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    address = Column(String, nullable=False, index=True)
    city = Column(String, nullable=True, default="New York")
    state = Column(String, nullable=True, default="NY")
    zip = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    created_at = Column(
        String, nullable=False, default=lambda: datetime.now(timezone.utc).isoformat()
    )


Index("idx_buildings_location", Building.latitude, Building.longitude)
