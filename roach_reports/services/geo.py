"""Nearby search: radius-to-bounding-box conversion and building filtering.

Uses an equirectangular approximation (one degree of latitude is taken as
111 km). Accuracy degrades towards the poles, so centres at or beyond
MAX_CENTER_LATITUDE are rejected instead of producing an unbounded box.
"""
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from roach_reports.utils.exceptions import InvalidArgument

METERS_PER_DEGREE = 111000
DEFAULT_RADIUS_METERS = 1000.0
MAX_RESULTS = 100
MAX_CENTER_LATITUDE = 89.9


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, lat: float | None, lng: float | None) -> bool:
        if lat is None or lng is None:
            return False
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng


def _as_float(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{name} must be a number")
    if not math.isfinite(number):
        raise InvalidArgument(f"{name} must be a finite number")
    return number


def bounding_box(center_lat: Any, center_lng: Any, radius_meters: Any = None) -> BoundingBox:
    if center_lat is None or center_lng is None:
        raise InvalidArgument("lat and lng are required")

    lat = _as_float(center_lat, "lat")
    lng = _as_float(center_lng, "lng")
    radius = DEFAULT_RADIUS_METERS if radius_meters is None else _as_float(radius_meters, "radius")

    if not -90 <= lat <= 90:
        raise InvalidArgument("lat must be between -90 and 90")
    if not -180 <= lng <= 180:
        raise InvalidArgument("lng must be between -180 and 180")
    if radius <= 0:
        raise InvalidArgument("radius must be greater than 0")
    if abs(lat) >= MAX_CENTER_LATITUDE:
        raise InvalidArgument(
            f"lat must be between -{MAX_CENTER_LATITUDE} and {MAX_CENTER_LATITUDE} for nearby search"
        )

    lat_delta = radius / METERS_PER_DEGREE
    lng_delta = radius / (METERS_PER_DEGREE * math.cos(math.radians(lat)))

    return BoundingBox(
        min_lat=lat - lat_delta,
        max_lat=lat + lat_delta,
        min_lng=lng - lng_delta,
        max_lng=lng + lng_delta,
    )


def _coordinates(building: Any) -> tuple[Any, Any]:
    if isinstance(building, Mapping):
        return building.get("latitude"), building.get("longitude")
    return getattr(building, "latitude", None), getattr(building, "longitude", None)


def filter_within(buildings: Iterable[Any], box: BoundingBox, limit: int = MAX_RESULTS) -> list:
    """Keep buildings inside the box, in input order, at most ``limit`` of them.

    Buildings without both coordinates are skipped.
    """
    result = []
    for building in buildings:
        if len(result) >= limit:
            break
        lat, lng = _coordinates(building)
        if box.contains(lat, lng):
            result.append(building)
    return result


def filter_nearby(
    buildings: Iterable[Any],
    center_lat: Any,
    center_lng: Any,
    radius_meters: Any = None,
    limit: int = MAX_RESULTS,
) -> list:
    return filter_within(buildings, bounding_box(center_lat, center_lng, radius_meters), limit)
