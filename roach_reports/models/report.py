import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Integer, String

from roach_reports.database import Base


class Report(Base):
    __tablename__ = "reports"
    __table_args__ = (
        CheckConstraint("severity >= 1 AND severity <= 5", name="ck_reports_severity_range"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    building_id = Column(
        String, ForeignKey("buildings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    unit_number = Column(String, nullable=True)
    has_roaches = Column(Boolean, nullable=False)
    severity = Column(Integer, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(
        String, nullable=False, index=True, default=lambda: datetime.now(timezone.utc).isoformat()
    )


class ReportImage(Base):
    __tablename__ = "report_images"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    report_id = Column(
        String, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_url = Column(String, nullable=False)
    created_at = Column(
        String, nullable=False, default=lambda: datetime.now(timezone.utc).isoformat()
    )
