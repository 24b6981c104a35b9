"""Visual assignment for the map draw list."""

from .visuals import (
    DISTINGUISHED_COLOR,
    PALETTE,
    Role,
    current_location_style,
    destination_marker_style,
    podium_badge,
    report_marker_style,
    style_for,
    water_quality_color,
    water_quality_label,
)

__all__ = [
    "DISTINGUISHED_COLOR",
    "PALETTE",
    "Role",
    "current_location_style",
    "style_for",
    "destination_marker_style",
    "report_marker_style",
    "podium_badge",
    "water_quality_color",
    "water_quality_label",
]
