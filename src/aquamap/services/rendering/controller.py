"""Stateful owner of map data, selection and viewport for one map surface."""

from __future__ import annotations

import logging
from typing import Sequence

from ...config import settings
from ...models.domain import CameraFit, Connection, Destination, Point, RenderResult, Report, TapEvent
from ..association import compute_all_connections, find_shortest_route_index, valid_destinations
from ..geospatial import is_valid_point
from ..selection import Selection, SelectionKind, SelectionStateMachine
from ..viewport import ViewportController
from .assembler import assemble

logger = logging.getLogger(__name__)


class MapController:
    """Recomputes rankings when data changes and re-assembles on every event.

    Zoom and selection changes never trigger re-ranking.
    """

    def __init__(
        self,
        *,
        viewport: ViewportController | None = None,
        selection: SelectionStateMachine | None = None,
        connections_per_report: int | None = None,
        podium_ranks: int | None = None,
    ) -> None:
        self.viewport = viewport or ViewportController()
        self.selection = selection or SelectionStateMachine()
        self.connections_per_report = (
            connections_per_report if connections_per_report is not None else settings.max_connections_per_report
        )
        if self.connections_per_report < 1:
            raise ValueError("connections_per_report must be >= 1")
        self.podium_ranks = podium_ranks if podium_ranks is not None else settings.podium_ranks

        self.reports: tuple[Report, ...] = ()
        self.destinations: tuple[Destination, ...] = ()
        self.current_location: Point | None = None
        self.shortest_route_index: int | None = None
        self._connections: dict[str, list[Connection]] = {}

    def load(
        self,
        reports: Sequence[Report],
        destinations: Sequence[Destination],
        current_location: Point | None = None,
    ) -> CameraFit:
        """Replace the data set, re-rank from scratch and refit the camera."""
        self.reports = tuple(reports)
        self.destinations = tuple(destinations)
        self.current_location = current_location

        self._connections = compute_all_connections(self.reports, self.destinations, self.connections_per_report)
        self.shortest_route_index = find_shortest_route_index(self.destinations)
        self._drop_stale_selection()

        logger.info(
            "Loaded %d reports and %d destinations (shortest route: %s)",
            len(self.reports),
            len(self.destinations),
            self.shortest_route_index,
        )
        return self.fit()

    def _drop_stale_selection(self) -> None:
        current = self.selection.current
        if current.kind is SelectionKind.ROUTE:
            known = {d.index for d in valid_destinations(self.destinations)}
            if current.route_index not in known:
                self.selection.close()
        elif current.kind is SelectionKind.REPORT:
            known = {r.id for r in self.reports if is_valid_point(r.location)}
            if current.report_id not in known:
                self.selection.close()

    def active_points(self) -> list[Point]:
        points = [report.location for report in self.reports]
        points.extend(destination.location for destination in self.destinations)
        if self.current_location is not None:
            points.append(self.current_location)
        return [point for point in points if is_valid_point(point)]

    def fit(self) -> CameraFit:
        return self.viewport.fit_to_points(self.active_points())

    def connections_for(self, report_id: str) -> list[Connection]:
        return list(self._connections.get(report_id, []))

    def handle(self, event: TapEvent) -> Selection:
        return self.selection.handle(event)

    def zoom_in(self) -> bool:
        return self.viewport.zoom_in()

    def zoom_out(self) -> bool:
        return self.viewport.zoom_out()

    def set_zoom(self, zoom: float) -> None:
        self.viewport.on_zoom_changed(zoom)

    def render(self) -> RenderResult:
        return assemble(
            self.reports,
            self.destinations,
            self.selection.current,
            self.viewport.state(),
            self.connections_per_report,
            current_location=self.current_location,
            podium_ranks=self.podium_ranks,
            connections=self._connections,
        )
