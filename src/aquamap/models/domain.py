"""Domain models for reports, water-supply destinations and the map draw list."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class Point:
    latitude: float
    longitude: float


class WaterQuality(str, Enum):
    """Classification label returned by the water-quality backend."""

    # declaration order matches the integer encoding used by stored reports
    HIGH_PH = "high_ph"
    HIGH_PH_TEMP = "high_ph_temp"
    LOW_PH = "low_ph"
    LOW_TEMP = "low_temp"
    LOW_TEMP_HIGH_PH = "low_temp_high_ph"
    OPTIMUM = "optimum"
    UNKNOWN = "unknown"


@dataclass(slots=True)
class Report:
    """A user-submitted water-quality issue."""

    id: str
    location: Optional[Point]
    water_quality: WaterQuality = WaterQuality.UNKNOWN
    title: str = ""
    description: str = ""
    address: str = ""
    is_resolved: bool = False
    confidence: Optional[float] = None


@dataclass(slots=True)
class Destination:
    """A water-supply point with route data precomputed by the routing backend."""

    index: int
    location: Optional[Point]
    distance_km: float
    travel_time_label: str = ""
    polyline: tuple[Point, ...] = ()
    name: str = ""


@dataclass(slots=True)
class Connection:
    report_id: str
    destination: Destination
    rank: int
    distance_km: float


@dataclass(frozen=True, slots=True)
class Style:
    color: str
    stroke_width: float
    opacity: float
    dashed: bool = False
    z_index: int = 0


class TapKind(str, Enum):
    DESTINATION = "destination"
    REPORT = "report"
    BACKGROUND = "background"
    CLOSE = "close"


@dataclass(frozen=True, slots=True)
class TapEvent:
    """Inbound user interaction, also attached to markers as their tap callback."""

    kind: TapKind
    route_index: Optional[int] = None
    report_id: Optional[str] = None


class MarkerKind(str, Enum):
    REPORT = "report"
    DESTINATION = "destination"
    CURRENT_LOCATION = "current_location"


class PolylineKind(str, Enum):
    ROUTE = "route"
    CONNECTION = "connection"


@dataclass(slots=True)
class Marker:
    kind: MarkerKind
    entity_id: str
    point: Point
    style: Style
    label: str = ""
    badge: Optional[str] = None
    tap: Optional[TapEvent] = None


@dataclass(slots=True)
class Polyline:
    kind: PolylineKind
    points: tuple[Point, ...]
    style: Style
    destination_index: int
    report_id: Optional[str] = None
    rank: int = 0


@dataclass(slots=True)
class RenderResult:
    markers: list[Marker] = field(default_factory=list)
    polylines: list[Polyline] = field(default_factory=list)
    unlocated_report_ids: list[str] = field(default_factory=list)
    shortest_route_index: Optional[int] = None


@dataclass(frozen=True, slots=True)
class ViewportState:
    zoom: float
    marker_budget: int
    center: Point


@dataclass(frozen=True, slots=True)
class CameraFit:
    """Pending "move camera to bounds" command; a newer fit replaces it."""

    south_west: Point
    north_east: Point
    padding_fraction: float
