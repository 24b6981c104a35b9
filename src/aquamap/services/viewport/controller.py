"""Zoom, marker budget and camera-fit state for the admin map."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ...config import settings
from ...models.domain import CameraFit, Point, ViewportState
from ..geospatial import bounding_box, fallback_bounds, is_valid_point, widen_zero_span

logger = logging.getLogger(__name__)


def marker_budget_for_zoom(
    zoom: float,
    tiers: Sequence[tuple[float, int]] | None = None,
    floor_budget: int | None = None,
) -> int:
    """Step function from zoom level to the number of destination markers shown.

    ``tiers`` are ``(minimum zoom, budget)`` pairs; the highest matching tier wins.
    """
    tiers = tiers if tiers is not None else settings.marker_budget_tiers
    floor_budget = floor_budget if floor_budget is not None else settings.min_marker_budget
    for min_zoom, budget in sorted(tiers, key=lambda tier: tier[0], reverse=True):
        if zoom >= min_zoom:
            return budget
    return floor_budget


class ViewportController:
    def __init__(
        self,
        *,
        min_zoom: float | None = None,
        max_zoom: float | None = None,
        initial_zoom: float | None = None,
        entity_zoom: float | None = None,
        zoom_step: float | None = None,
        tiers: Sequence[tuple[float, int]] | None = None,
        floor_budget: int | None = None,
        padding_fraction: float | None = None,
        fallback_delta: float | None = None,
        default_center: Point | None = None,
    ) -> None:
        self.min_zoom = min_zoom if min_zoom is not None else settings.min_zoom
        self.max_zoom = max_zoom if max_zoom is not None else settings.max_zoom
        if self.min_zoom > self.max_zoom:
            raise ValueError("min_zoom must be <= max_zoom")
        self.entity_zoom = entity_zoom if entity_zoom is not None else settings.entity_zoom
        self.zoom_step = zoom_step if zoom_step is not None else settings.zoom_step
        self.tiers = tuple(tiers if tiers is not None else settings.marker_budget_tiers)
        self.floor_budget = floor_budget if floor_budget is not None else settings.min_marker_budget
        self.padding_fraction = (
            padding_fraction if padding_fraction is not None else settings.bounds_padding_fraction
        )
        self.fallback_delta = fallback_delta if fallback_delta is not None else settings.fallback_bounds_delta
        self.default_center = default_center or Point(*settings.default_center)

        self.zoom = self._clamp(initial_zoom if initial_zoom is not None else settings.initial_zoom)
        self.marker_budget = marker_budget_for_zoom(self.zoom, self.tiers, self.floor_budget)
        self.center = self.default_center
        self.pending_fit: CameraFit | None = None

    def _clamp(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))

    def state(self) -> ViewportState:
        return ViewportState(zoom=self.zoom, marker_budget=self.marker_budget, center=self.center)

    @property
    def can_zoom_in(self) -> bool:
        return self.zoom < self.max_zoom

    @property
    def can_zoom_out(self) -> bool:
        return self.zoom > self.min_zoom

    def on_zoom_changed(self, new_zoom: float) -> ViewportState:
        self.zoom = self._clamp(new_zoom)
        self.marker_budget = marker_budget_for_zoom(self.zoom, self.tiers, self.floor_budget)
        return self.state()

    def zoom_in(self) -> bool:
        """Step the zoom up. Returns False, leaving state untouched, at max zoom."""
        if not self.can_zoom_in:
            return False
        self.on_zoom_changed(self.zoom + self.zoom_step)
        return True

    def zoom_out(self) -> bool:
        """Step the zoom down. Returns False, leaving state untouched, at min zoom."""
        if not self.can_zoom_out:
            return False
        self.on_zoom_changed(self.zoom - self.zoom_step)
        return True

    def fit_to_points(self, points: Iterable[Point | None]) -> CameraFit:
        """Fit the camera to every valid point, replacing any earlier pending fit."""
        valid = [point for point in points if is_valid_point(point)]
        bounds = bounding_box(valid, self.padding_fraction)
        if bounds is None:
            logger.debug("No valid points to fit, using the default center")
            bounds = fallback_bounds(self.default_center, self.fallback_delta)
        else:
            bounds = widen_zero_span(bounds, self.fallback_delta)

        self.center = bounds.center
        self.pending_fit = CameraFit(
            south_west=bounds.south_west,
            north_east=bounds.north_east,
            padding_fraction=self.padding_fraction,
        )
        return self.pending_fit

    def take_pending_fit(self) -> CameraFit | None:
        fit, self.pending_fit = self.pending_fit, None
        return fit

    def center_on(self, point: Point, zoom: float | None = None) -> ViewportState:
        self.center = point
        if zoom is not None:
            self.on_zoom_changed(zoom)
        return self.state()

    def center_on_entity(self, point: Point) -> ViewportState:
        return self.center_on(point, self.entity_zoom)
