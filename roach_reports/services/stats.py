"""Report statistics and status colouring for a single building."""
import calendar
import math
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

STATUS_RED = "red"
STATUS_ORANGE = "orange"
STATUS_GREEN = "green"
STATUS_GRAY = "gray"

RECENT_MONTHS = 6


def _field(report: Any, name: str) -> Any:
    if isinstance(report, Mapping):
        return report.get(name)
    return getattr(report, name, None)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up (round() rounds half to even)."""
    return math.floor(value + 0.5)


def aggregate_report_stats(reports: Iterable[Any]) -> dict:
    """Reduce a building's reports into totalReports, positiveReports,
    percentPositive and avgSeverity.

    A report with no severity contributes 0 to the severity sum but is still
    counted in the average's denominator.
    """
    total = 0
    positive = 0
    severity_sum = 0
    for report in reports:
        total += 1
        if _field(report, "has_roaches"):
            positive += 1
        severity_sum += _field(report, "severity") or 0

    if total == 0:
        return {
            "totalReports": 0,
            "positiveReports": 0,
            "percentPositive": 0,
            "avgSeverity": 0,
        }

    return {
        "totalReports": total,
        "positiveReports": positive,
        "percentPositive": round_half_up(positive / total * 100),
        "avgSeverity": round_half_up(severity_sum / total * 10) / 10,
    }


def subtract_months(moment: datetime, months: int) -> datetime:
    """Step back whole calendar months, clamping the day to the target month."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def building_status(reports: Iterable[Any], now: datetime | None = None) -> str:
    """Colour bucket for list and map markers.

    red: a roach sighting within the last six months; orange: only older
    sightings; green: reports but no sightings; gray: no reports at all.
    """
    reports = list(reports)
    if not reports:
        return STATUS_GRAY

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = subtract_months(now, RECENT_MONTHS)

    positives = [r for r in reports if _field(r, "has_roaches")]
    for report in positives:
        created_at = _parse_timestamp(_field(report, "created_at"))
        if created_at is not None and created_at > cutoff:
            return STATUS_RED
    if positives:
        return STATUS_ORANGE
    return STATUS_GREEN
