"""Export services."""

from .geojson import (
    marker_to_feature,
    polyline_to_feature,
    render_result_to_geojson,
    save_geojson,
)

__all__ = [
    "marker_to_feature",
    "polyline_to_feature",
    "render_result_to_geojson",
    "save_geojson",
]
