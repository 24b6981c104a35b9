"""Request-level orchestration for the map endpoints."""

from __future__ import annotations

import logging

from ...data.records import coerce_point, load_destinations, load_reports
from ...models.domain import (
    CameraFit,
    RenderResult,
    Style,
    TapEvent,
    TapKind,
)
from ...schemas.map import (
    CameraFitModel,
    FitRequest,
    FitResponse,
    MarkerModel,
    PolylineModel,
    RenderRequest,
    RenderResponse,
    SelectionModel,
    SelectRequest,
    StyleModel,
    TapEventModel,
    ViewportModel,
)
from ..selection import Selection, SelectionStateMachine
from ..viewport import ViewportController
from .controller import MapController

logger = logging.getLogger(__name__)


def _to_selection(model: SelectionModel) -> Selection:
    if model.kind == "route" and model.route_index is not None:
        return Selection.route(model.route_index)
    if model.kind == "report" and model.report_id is not None:
        return Selection.report(model.report_id)
    return Selection.none()


def _selection_model(selection: Selection) -> SelectionModel:
    return SelectionModel(
        kind=selection.kind.value,
        route_index=selection.route_index,
        report_id=selection.report_id,
    )


def _style_model(style: Style) -> StyleModel:
    return StyleModel(
        color=style.color,
        stroke_width=style.stroke_width,
        opacity=style.opacity,
        dashed=style.dashed,
        z_index=style.z_index,
    )


def _tap_model(event: TapEvent | None) -> TapEventModel | None:
    if event is None:
        return None
    return TapEventModel(kind=event.kind.value, route_index=event.route_index, report_id=event.report_id)


def _camera_fit_model(fit: CameraFit) -> CameraFitModel:
    return CameraFitModel(
        south_west=(fit.south_west.latitude, fit.south_west.longitude),
        north_east=(fit.north_east.latitude, fit.north_east.longitude),
        padding_fraction=fit.padding_fraction,
    )


def _viewport_model(viewport: ViewportController) -> ViewportModel:
    state = viewport.state()
    return ViewportModel(
        zoom=state.zoom,
        marker_budget=state.marker_budget,
        center=(state.center.latitude, state.center.longitude),
        can_zoom_in=viewport.can_zoom_in,
        can_zoom_out=viewport.can_zoom_out,
    )


def build_controller(payload: RenderRequest) -> tuple[MapController, CameraFit]:
    """Controller loaded with the request's data, selection and zoom."""
    viewport = ViewportController()
    if payload.zoom is not None:
        viewport.on_zoom_changed(payload.zoom)
    controller = MapController(
        viewport=viewport,
        selection=SelectionStateMachine(_to_selection(payload.selection)),
        connections_per_report=payload.connections_per_report,
        podium_ranks=payload.podium_ranks,
    )
    reports = load_reports(payload.reports)
    destinations = load_destinations(payload.destinations, use_row_index=True)
    skipped = len(payload.reports) - len(reports) + len(payload.destinations) - len(destinations)
    if skipped:
        logger.warning(f"Rendering without {skipped} invalid record(s)")
    fit = controller.load(reports, destinations, coerce_point(payload.current_location))
    return controller, fit


def render_result_to_response(
    result: RenderResult,
    controller: MapController,
    fit: CameraFit | None = None,
) -> RenderResponse:
    return RenderResponse(
        markers=[
            MarkerModel(
                kind=marker.kind.value,
                entity_id=marker.entity_id,
                latitude=marker.point.latitude,
                longitude=marker.point.longitude,
                style=_style_model(marker.style),
                label=marker.label,
                badge=marker.badge,
                tap=_tap_model(marker.tap),
            )
            for marker in result.markers
        ],
        polylines=[
            PolylineModel(
                kind=polyline.kind.value,
                coordinates=[(point.latitude, point.longitude) for point in polyline.points],
                style=_style_model(polyline.style),
                destination_index=polyline.destination_index,
                report_id=polyline.report_id,
                rank=polyline.rank,
            )
            for polyline in result.polylines
        ],
        unlocated_report_ids=list(result.unlocated_report_ids),
        shortest_route_index=result.shortest_route_index,
        selection=_selection_model(controller.selection.current),
        viewport=_viewport_model(controller.viewport),
        camera_fit=_camera_fit_model(fit) if fit else None,
        metadata={
            "report_count": len(controller.reports),
            "destination_count": len(controller.destinations),
            "connections_per_report": controller.connections_per_report,
        },
    )


def render_map(payload: RenderRequest) -> RenderResponse:
    controller, fit = build_controller(payload)
    result = controller.render()
    return render_result_to_response(result, controller, fit)


def apply_selection_event(payload: SelectRequest) -> SelectionModel:
    machine = SelectionStateMachine(_to_selection(payload.selection))
    event = TapEvent(
        kind=TapKind(payload.event.kind),
        route_index=payload.event.route_index,
        report_id=payload.event.report_id,
    )
    return _selection_model(machine.handle(event))


def fit_viewport(payload: FitRequest) -> FitResponse:
    viewport = ViewportController()
    if payload.zoom is not None:
        viewport.on_zoom_changed(payload.zoom)
    fit = viewport.fit_to_points(coerce_point(point) for point in payload.points)
    return FitResponse(camera_fit=_camera_fit_model(fit), viewport=_viewport_model(viewport))
