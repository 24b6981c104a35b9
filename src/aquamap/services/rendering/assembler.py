"""Compose rankings, styles, selection and viewport into the map draw list."""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from ...models.domain import (
    Connection,
    Destination,
    Marker,
    MarkerKind,
    Point,
    Polyline,
    PolylineKind,
    RenderResult,
    Report,
    TapEvent,
    TapKind,
    ViewportState,
)
from ..association import compute_all_connections, find_shortest_route_index, rank_destinations
from ..geospatial import is_valid_point
from ..selection import NO_SELECTION, Selection, SelectionKind
from ..styling import (
    Role,
    current_location_style,
    destination_marker_style,
    podium_badge,
    report_marker_style,
    style_for,
    water_quality_label,
)

logger = logging.getLogger(__name__)


def select_visible_destinations(
    ranked: Sequence[int],
    shortest_index: int | None,
    selection: Selection,
    marker_budget: int,
) -> list[int]:
    """Destination indices to draw, in priority order.

    A selected route is shown alone. Otherwise the shortest route comes first,
    then ascending distance order, capped at the marker budget.
    """
    if selection.kind is SelectionKind.ROUTE:
        return [selection.route_index] if selection.route_index in ranked else []

    ordered = [shortest_index] if shortest_index is not None else []
    ordered.extend(index for index in ranked if index != shortest_index)
    return ordered[: max(0, marker_budget)]


def _route_points(destination: Destination, current_location: Point | None) -> tuple[Point, ...]:
    polyline = tuple(point for point in destination.polyline if is_valid_point(point))
    if len(polyline) >= 2:
        return polyline
    if is_valid_point(current_location):
        return (current_location, destination.location)
    return ()


def _destination_label(destination: Destination) -> str:
    name = destination.name or f"Water Supply {destination.index + 1}"
    return f"{name} ({destination.distance_km:.1f} km)"


def assemble(
    reports: Sequence[Report],
    destinations: Sequence[Destination],
    selection: Selection | None,
    viewport: ViewportState,
    connections_per_report: int = 5,
    *,
    current_location: Point | None = None,
    podium_ranks: int = 0,
    connections: Mapping[str, list[Connection]] | None = None,
) -> RenderResult:
    """Build the ordered markers and polylines for one render cycle.

    ``connections`` may carry rankings computed earlier for the same data;
    they are recomputed when omitted. Items are ordered by z-index so
    emphasised entities come last and draw on top.
    """
    selection = selection or NO_SELECTION

    shortest_index = find_shortest_route_index(destinations)
    ranked = rank_destinations(destinations)
    route_rank = {index: position for position, index in enumerate(ranked)}
    by_index = {destination.index: destination for destination in destinations if destination.index in route_rank}
    if connections is None:
        connections = compute_all_connections(reports, destinations, connections_per_report)

    visible = select_visible_destinations(ranked, shortest_index, selection, viewport.marker_budget)
    visible_set = set(visible)
    selected_route = selection.route_index if selection.kind is SelectionKind.ROUTE else None
    selected_report = selection.report_id if selection.kind is SelectionKind.REPORT else None

    result = RenderResult(shortest_route_index=shortest_index)

    if is_valid_point(current_location):
        result.markers.append(
            Marker(
                kind=MarkerKind.CURRENT_LOCATION,
                entity_id="current_location",
                point=current_location,
                style=current_location_style(),
                label="Current Location",
            )
        )

    located: dict[str, Report] = {}
    for report in reports:
        if not is_valid_point(report.location):
            result.unlocated_report_ids.append(report.id)
            continue
        located[report.id] = report
        result.markers.append(
            Marker(
                kind=MarkerKind.REPORT,
                entity_id=report.id,
                point=report.location,
                style=report_marker_style(report, report.id == selected_report),
                label=report.title or water_quality_label(report.water_quality),
                tap=TapEvent(kind=TapKind.REPORT, report_id=report.id),
            )
        )

    for index in visible:
        destination = by_index[index]
        rank = route_rank[index]
        is_shortest = index == shortest_index
        is_selected = index == selected_route
        result.markers.append(
            Marker(
                kind=MarkerKind.DESTINATION,
                entity_id=str(index),
                point=destination.location,
                style=destination_marker_style(rank, is_shortest, is_selected),
                label=_destination_label(destination),
                badge=podium_badge(rank, podium_ranks),
                tap=TapEvent(kind=TapKind.DESTINATION, route_index=index),
            )
        )
        points = _route_points(destination, current_location)
        if not points:
            logger.debug("Destination %s has no drawable route geometry", index)
            continue
        result.polylines.append(
            Polyline(
                kind=PolylineKind.ROUTE,
                points=points,
                style=style_for(rank, is_shortest, is_selected, Role.ROUTE),
                destination_index=index,
                rank=rank,
            )
        )

    for report_id, report_connections in connections.items():
        report = located.get(report_id)
        if report is None:
            continue
        for connection in report_connections:
            target = connection.destination
            if target.index not in visible_set:
                continue
            is_selected = report_id == selected_report or target.index == selected_route
            result.polylines.append(
                Polyline(
                    kind=PolylineKind.CONNECTION,
                    points=(report.location, target.location),
                    style=style_for(connection.rank, False, is_selected, Role.CONNECTION),
                    destination_index=target.index,
                    report_id=report_id,
                    rank=connection.rank,
                )
            )

    result.markers.sort(key=lambda marker: marker.style.z_index)
    result.polylines.sort(key=lambda polyline: polyline.style.z_index)

    logger.debug(
        "Assembled %d markers and %d polylines (%d of %d destinations visible)",
        len(result.markers),
        len(result.polylines),
        len(visible),
        len(destinations),
    )
    return result
