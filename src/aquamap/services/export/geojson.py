"""GeoJSON export of the assembled map draw list."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from shapely.geometry import LineString, mapping
from shapely.geometry import Point as ShapelyPoint

from ...models.domain import Marker, Polyline, RenderResult, Style


def _style_properties(style: Style) -> Dict[str, Any]:
    return {
        "stroke": style.color,
        "stroke-width": style.stroke_width,
        "stroke-opacity": style.opacity,
        "dashed": style.dashed,
        "z_index": style.z_index,
    }


def marker_to_feature(marker: Marker) -> Dict[str, Any]:
    # GeoJSON uses lon,lat order (x,y)
    geometry = ShapelyPoint(marker.point.longitude, marker.point.latitude)
    properties: Dict[str, Any] = {
        "kind": marker.kind.value,
        "entity_id": marker.entity_id,
        "label": marker.label,
        "marker-color": marker.style.color,
        **_style_properties(marker.style),
    }
    if marker.badge:
        properties["badge"] = marker.badge
    return {"type": "Feature", "geometry": mapping(geometry), "properties": properties}


def polyline_to_feature(polyline: Polyline) -> Dict[str, Any] | None:
    """LineString feature, or None when the line has fewer than two points."""
    if len(polyline.points) < 2:
        return None
    geometry = LineString([(point.longitude, point.latitude) for point in polyline.points])
    properties: Dict[str, Any] = {
        "kind": polyline.kind.value,
        "destination_index": polyline.destination_index,
        "rank": polyline.rank,
        **_style_properties(polyline.style),
    }
    if polyline.report_id is not None:
        properties["report_id"] = polyline.report_id
    return {"type": "Feature", "geometry": mapping(geometry), "properties": properties}


def render_result_to_geojson(result: RenderResult) -> Dict[str, Any]:
    """FeatureCollection with lines first, then markers, each in draw order."""
    features: List[Dict[str, Any]] = []
    for polyline in result.polylines:
        feature = polyline_to_feature(polyline)
        if feature is not None:
            features.append(feature)
    features.extend(marker_to_feature(marker) for marker in result.markers)
    return {
        "type": "FeatureCollection",
        "features": features,
        "properties": {
            "shortest_route_index": result.shortest_route_index,
            "unlocated_report_ids": list(result.unlocated_report_ids),
        },
    }


def save_geojson(collection: Dict[str, Any], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(collection, f, indent=2, ensure_ascii=False)
