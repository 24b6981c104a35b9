"""Deterministic visual encodings for routes, connections and markers."""

from __future__ import annotations

from enum import Enum

from ...models.domain import Report, Style, WaterQuality

# Cyclic route palette, excludes DISTINGUISHED_COLOR.
PALETTE: tuple[str, ...] = (
    "#2196F3",  # blue
    "#FF9800",  # orange
    "#9C27B0",  # purple
    "#F44336",  # red
    "#009688",  # teal
    "#E91E63",  # pink
    "#3F51B5",  # indigo
    "#795548",  # brown
)
DISTINGUISHED_COLOR = "#4CAF50"  # green
CURRENT_LOCATION_COLOR = "#D32F2F"

SHORTEST_STROKE_WIDTH = 8.0
SELECTED_STROKE_WIDTH = 6.0
ROUTE_STROKE_WIDTH = 4.0
CONNECTION_STROKE_WIDTH = 3.0

BASELINE_OPACITY = 0.7
CONNECTION_FADE_PER_RANK = 0.1
MIN_CONNECTION_OPACITY = 0.3

Z_BASE = 0
Z_SELECTED = 1
Z_SHORTEST = 2

PODIUM_BADGES: tuple[str, ...] = ("gold", "silver", "bronze")

_QUALITY_COLORS: dict[WaterQuality, str] = {
    WaterQuality.OPTIMUM: "#2196F3",
    WaterQuality.LOW_TEMP: "#4CAF50",
    WaterQuality.HIGH_PH: "#FF9800",
    WaterQuality.LOW_PH: "#F57C00",
    WaterQuality.HIGH_PH_TEMP: "#F44336",
    WaterQuality.LOW_TEMP_HIGH_PH: "#9C27B0",
    WaterQuality.UNKNOWN: "#9E9E9E",
}

_QUALITY_LABELS: dict[WaterQuality, str] = {
    WaterQuality.OPTIMUM: "Optimum",
    WaterQuality.HIGH_PH: "High pH",
    WaterQuality.HIGH_PH_TEMP: "High pH & Temperature",
    WaterQuality.LOW_PH: "Low pH",
    WaterQuality.LOW_TEMP: "Low Temperature",
    WaterQuality.LOW_TEMP_HIGH_PH: "Low Temp & High pH",
    WaterQuality.UNKNOWN: "Unknown",
}


class Role(str, Enum):
    ROUTE = "route"
    CONNECTION = "connection"


def palette_color(rank: int) -> str:
    return PALETTE[rank % len(PALETTE)]


def style_for(rank: int, is_shortest: bool, is_selected: bool, role: Role = Role.ROUTE) -> Style:
    """Style of a route or connection line.

    Shortest wins over selected, which wins over the rank-based baseline.
    Baseline lines are dashed on odd ranks and connections fade with rank
    depth.
    """
    if rank < 0:
        raise ValueError("rank must be >= 0")

    color = DISTINGUISHED_COLOR if is_shortest or rank == 0 else palette_color(rank)

    if is_shortest:
        return Style(color=color, stroke_width=SHORTEST_STROKE_WIDTH, opacity=1.0, dashed=False, z_index=Z_SHORTEST)
    if is_selected:
        return Style(color=color, stroke_width=SELECTED_STROKE_WIDTH, opacity=1.0, dashed=False, z_index=Z_SELECTED)

    if role is Role.CONNECTION:
        stroke_width = CONNECTION_STROKE_WIDTH
        opacity = max(MIN_CONNECTION_OPACITY, BASELINE_OPACITY - CONNECTION_FADE_PER_RANK * rank)
    else:
        stroke_width = ROUTE_STROKE_WIDTH
        opacity = BASELINE_OPACITY
    return Style(
        color=color,
        stroke_width=stroke_width,
        opacity=round(opacity, 4),
        dashed=rank % 2 == 1,
        z_index=Z_BASE,
    )


def destination_marker_style(rank: int, is_shortest: bool, is_selected: bool) -> Style:
    """Markers share the route's colour and emphasis but are never faded or dashed."""
    line = style_for(rank, is_shortest, is_selected, Role.ROUTE)
    return Style(color=line.color, stroke_width=line.stroke_width, opacity=1.0, dashed=False, z_index=line.z_index)


def report_marker_style(report: Report, is_selected: bool) -> Style:
    return Style(
        color=water_quality_color(report.water_quality),
        stroke_width=4.0 if is_selected else 2.0,
        opacity=1.0 if is_selected or not report.is_resolved else 0.6,
        dashed=False,
        z_index=Z_SELECTED if is_selected else Z_BASE,
    )


def current_location_style() -> Style:
    return Style(color=CURRENT_LOCATION_COLOR, stroke_width=3.0, opacity=1.0, z_index=Z_BASE)


def podium_badge(rank: int, podium_ranks: int) -> str | None:
    """Gold/silver/bronze badge for the top ``podium_ranks`` routes (at most three)."""
    if rank < min(podium_ranks, len(PODIUM_BADGES)):
        return PODIUM_BADGES[rank]
    return None


def water_quality_color(quality: WaterQuality) -> str:
    return _QUALITY_COLORS.get(quality, _QUALITY_COLORS[WaterQuality.UNKNOWN])


def water_quality_label(quality: WaterQuality) -> str:
    return _QUALITY_LABELS.get(quality, _QUALITY_LABELS[WaterQuality.UNKNOWN])
