"""Map render request/response schemas."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field


class SelectionModel(BaseModel):
    kind: Literal["none", "route", "report"] = "none"
    route_index: Optional[int] = None
    report_id: Optional[str] = None


class TapEventModel(BaseModel):
    kind: Literal["destination", "report", "background", "close"]
    route_index: Optional[int] = None
    report_id: Optional[str] = None


class RenderRequest(BaseModel):
    # Records are parsed one by one; a malformed record is skipped or left unlocated.
    reports: List[Any] = Field(
        default_factory=list,
        description="Report objects: id, location {latitude, longitude}, water_quality, title, is_resolved, ...",
    )
    destinations: List[Any] = Field(
        default_factory=list,
        description="Water-supply objects: index, location, distance_km, travel_time_label, polyline, name.",
    )
    current_location: Optional[Any] = None
    selection: SelectionModel = Field(default_factory=SelectionModel)
    zoom: Optional[float] = Field(default=None, description="Current map zoom; the configured initial zoom if omitted.")
    connections_per_report: Optional[int] = Field(default=None, ge=1)
    podium_ranks: Optional[int] = Field(default=None, ge=0, le=3)


class StyleModel(BaseModel):
    color: str
    stroke_width: float
    opacity: float
    dashed: bool
    z_index: int


class MarkerModel(BaseModel):
    kind: str
    entity_id: str
    latitude: float
    longitude: float
    style: StyleModel
    label: str
    badge: Optional[str] = None
    tap: Optional[TapEventModel] = None


class PolylineModel(BaseModel):
    kind: str
    coordinates: List[tuple[float, float]]
    style: StyleModel
    destination_index: int
    report_id: Optional[str] = None
    rank: int


class CameraFitModel(BaseModel):
    south_west: tuple[float, float]
    north_east: tuple[float, float]
    padding_fraction: float


class ViewportModel(BaseModel):
    zoom: float
    marker_budget: int
    center: tuple[float, float]
    can_zoom_in: bool
    can_zoom_out: bool


class RenderResponse(BaseModel):
    markers: List[MarkerModel]
    polylines: List[PolylineModel]
    unlocated_report_ids: List[str]
    shortest_route_index: Optional[int]
    selection: SelectionModel
    viewport: ViewportModel
    camera_fit: Optional[CameraFitModel] = None
    metadata: dict


class SelectRequest(BaseModel):
    selection: SelectionModel = Field(default_factory=SelectionModel)
    event: TapEventModel


class FitRequest(BaseModel):
    points: List[Any] = Field(default_factory=list)
    zoom: Optional[float] = None


class FitResponse(BaseModel):
    camera_fit: CameraFitModel
    viewport: ViewportModel
