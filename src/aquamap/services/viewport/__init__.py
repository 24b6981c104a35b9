"""Viewport state."""

from .controller import ViewportController, marker_budget_for_zoom

__all__ = ["ViewportController", "marker_budget_for_zoom"]
