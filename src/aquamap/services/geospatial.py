"""Geospatial helper functions."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from shapely.geometry import MultiPoint, box
from shapely.geometry import Point as ShapelyPoint

from ..models.domain import Point

EARTH_RADIUS_KM = 6371.0
DEFAULT_PADDING_FRACTION = 0.1
DEFAULT_FALLBACK_DELTA = 0.01  # about 1km


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(a: Point, b: Point) -> float:
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def is_valid_point(point: Optional[Point]) -> bool:
    """Return True if the point can take part in spatial computation.

    ``(0, 0)`` is the placeholder upstream parsers emit for missing coordinates,
    so it is treated as missing rather than as a location in the Gulf of Guinea.
    """

    if point is None:
        return False
    lat, lon = point.latitude, point.longitude
    if lat is None or lon is None:
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    if lat == 0.0 and lon == 0.0:
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


@dataclass(frozen=True, slots=True)
class Bounds:
    south_west: Point
    north_east: Point

    @property
    def center(self) -> Point:
        return Point(
            (self.south_west.latitude + self.north_east.latitude) / 2,
            (self.south_west.longitude + self.north_east.longitude) / 2,
        )

    def contains(self, point: Point) -> bool:
        area = box(
            self.south_west.longitude,
            self.south_west.latitude,
            self.north_east.longitude,
            self.north_east.latitude,
        )
        return area.covers(ShapelyPoint(point.longitude, point.latitude))


def fallback_bounds(center: Point, delta: float = DEFAULT_FALLBACK_DELTA) -> Bounds:
    """Small fixed-size box around ``center`` used when there is no span to fit."""

    return Bounds(
        south_west=Point(center.latitude - delta, center.longitude - delta),
        north_east=Point(center.latitude + delta, center.longitude + delta),
    )


def widen_zero_span(bounds: Bounds, delta: float = DEFAULT_FALLBACK_DELTA) -> Bounds:
    """Expand each axis that has no extent by ``delta`` on both sides."""

    sw, ne = bounds.south_west, bounds.north_east
    lat_delta = delta if sw.latitude == ne.latitude else 0.0
    lon_delta = delta if sw.longitude == ne.longitude else 0.0
    if not lat_delta and not lon_delta:
        return bounds
    return Bounds(
        south_west=Point(sw.latitude - lat_delta, sw.longitude - lon_delta),
        north_east=Point(ne.latitude + lat_delta, ne.longitude + lon_delta),
    )


def bounding_box(points: Iterable[Point], padding_fraction: float = DEFAULT_PADDING_FRACTION) -> Bounds | None:
    """Return the padded min/max box over ``points`` or None when there are none.

    Each axis is expanded by ``padding_fraction`` of its span on both sides.
    """

    coords = [(point.longitude, point.latitude) for point in points]
    if not coords:
        return None

    min_lon, min_lat, max_lon, max_lat = MultiPoint(coords).bounds
    lat_padding = (max_lat - min_lat) * padding_fraction
    lon_padding = (max_lon - min_lon) * padding_fraction
    return Bounds(
        south_west=Point(min_lat - lat_padding, min_lon - lon_padding),
        north_east=Point(max_lat + lat_padding, max_lon + lon_padding),
    )
