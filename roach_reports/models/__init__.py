from roach_reports.models.building import Building
from roach_reports.models.report import Report, ReportImage

__all__ = ["Building", "Report", "ReportImage"]
