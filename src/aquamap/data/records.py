"""Parsing of raw report and water-supply payloads into domain records."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping, Optional

from ..config import settings
from ..models.domain import Destination, Point, Report, WaterQuality

logger = logging.getLogger(__name__)

# Integer encoding used by stored reports.
_QUALITY_BY_INDEX: tuple[WaterQuality, ...] = tuple(WaterQuality)

_QUALITY_BY_CLASS: dict[str, WaterQuality] = {
    "HIGH_PH": WaterQuality.HIGH_PH,
    "HIGH_PH; HIGH_TEMP": WaterQuality.HIGH_PH_TEMP,
    "LOW_PH": WaterQuality.LOW_PH,
    "LOW_TEMP": WaterQuality.LOW_TEMP,
    "LOW_TEMP;HIGH_PH": WaterQuality.LOW_TEMP_HIGH_PH,
    "OPTIMUM": WaterQuality.OPTIMUM,
}


def _coerce_float(value: Any) -> Optional[float]:
    """Finite float from a number or numeric string; None when empty."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Unable to parse float from value '{value}'")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).replace(",", ""))
        except ValueError as exc:
            raise ValueError(f"Unable to parse float from value '{value}'") from exc
    if not math.isfinite(number):
        raise ValueError(f"Non-finite value '{value}'")
    return number


def coerce_point(payload: Any) -> Optional[Point]:
    """Point from a ``{latitude, longitude}`` mapping.

    Returns None when either coordinate is missing or unparseable, or for the
    ``(0, 0)`` placeholder, so the owning record is kept as unlocated.
    """
    if not isinstance(payload, Mapping):
        return None
    try:
        lat = _coerce_float(payload.get("latitude", payload.get("lat")))
        lon = _coerce_float(payload.get("longitude", payload.get("lng", payload.get("lon"))))
    except ValueError as e:
        logger.warning(f"Ignoring unparseable coordinates: {e}")
        return None
    if lat is None or lon is None:
        return None
    if lat == 0.0 and lon == 0.0:
        return None
    return Point(lat, lon)


def map_water_quality_class(label: str) -> WaterQuality:
    """Map a backend classification label onto a water quality state."""
    class_name = label.strip().upper()
    if "OPTIMUM" in class_name:
        return WaterQuality.OPTIMUM
    if "HIGH_PH" in class_name and "HIGH_TEMP" in class_name:
        return WaterQuality.HIGH_PH_TEMP
    if "LOW_TEMP" in class_name and "HIGH_PH" in class_name:
        return WaterQuality.LOW_TEMP_HIGH_PH
    if "HIGH_PH" in class_name:
        return WaterQuality.HIGH_PH
    if "LOW_PH" in class_name:
        return WaterQuality.LOW_PH
    if "LOW_TEMP" in class_name:
        return WaterQuality.LOW_TEMP
    return WaterQuality.UNKNOWN


def parse_water_quality(value: Any) -> WaterQuality:
    if isinstance(value, WaterQuality):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value < len(_QUALITY_BY_INDEX):
            return _QUALITY_BY_INDEX[value]
        return WaterQuality.UNKNOWN
    if isinstance(value, str):
        exact = _QUALITY_BY_CLASS.get(value.strip().upper())
        if exact is not None:
            return exact
        try:
            return WaterQuality(value.strip().lower())
        except ValueError:
            return map_water_quality_class(value)
    return WaterQuality.UNKNOWN


def format_travel_time(distance_km: float, average_speed_kmh: float | None = None) -> str:
    """Human readable travel time at an average speed, e.g. '25 min' or '1 h 5 min'."""
    speed = average_speed_kmh or settings.average_speed_kmh
    minutes = round(distance_km / speed * 60)
    if minutes < 60:
        return f"{minutes} min"
    hours, remaining = divmod(minutes, 60)
    return f"{hours} h {remaining} min" if remaining else f"{hours} h"


def parse_report(row: Mapping[str, Any]) -> Report:
    """Build a report; missing or unusable coordinates yield an unlocated report."""
    if not isinstance(row, Mapping):
        raise ValueError(f"Report must be an object, got {type(row).__name__}")
    report_id = str(row.get("id") or "").strip()
    if not report_id:
        raise ValueError("Report is missing an id")
    try:
        confidence = _coerce_float(row.get("confidence"))
    except ValueError as e:
        logger.warning(f"Ignoring confidence of report {report_id}: {e}")
        confidence = None
    return Report(
        id=report_id,
        location=coerce_point(row.get("location")),
        water_quality=parse_water_quality(row.get("waterQuality", row.get("water_quality"))),
        title=str(row.get("title") or ""),
        description=str(row.get("description") or ""),
        address=str(row.get("address") or ""),
        is_resolved=row.get("isResolved", row.get("is_resolved")) is True,
        confidence=confidence,
    )


def parse_destination(row: Mapping[str, Any], index: int) -> Destination:
    """Build a destination from a routing backend record.

    Coordinates are read from ``destination`` when present, else from the
    record itself. A missing, negative or non-finite distance is rejected.
    """
    if not isinstance(row, Mapping):
        raise ValueError(f"Destination must be an object, got {type(row).__name__}")
    target = row.get("destination") if isinstance(row.get("destination"), Mapping) else row
    location = coerce_point(target) or coerce_point(row.get("location"))

    distance = _coerce_float(row.get("distance_km", row.get("distance")))
    if distance is None:
        raise ValueError(f"Destination {index} is missing a distance")
    if distance < 0:
        raise ValueError(f"Destination {index} has a negative distance")

    polyline: list[Point] = []
    raw_polyline = row.get("polyline_points") or row.get("polyline") or []
    if isinstance(raw_polyline, list):
        for raw_point in raw_polyline:
            point = coerce_point(raw_point)
            if point is not None:
                polyline.append(point)

    name = (
        row.get("destination_name")
        or (target.get("street_name") if isinstance(target, Mapping) else None)
        or row.get("name")
        or row.get("address")
        or ""
    )
    travel_time = (
        row.get("estimated_time")
        or row.get("travel_time")
        or row.get("travel_time_label")
        or format_travel_time(distance)
    )
    return Destination(
        index=index,
        location=location,
        distance_km=distance,
        travel_time_label=str(travel_time),
        polyline=tuple(polyline),
        name=str(name),
    )


def _row_index(row: Any, position: int) -> int:
    if not isinstance(row, Mapping) or row.get("index") is None:
        return position
    value = row["index"]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Destination index must be an integer, got '{value}'")
    return value


def load_reports(rows: Iterable[Any]) -> list[Report]:
    reports: list[Report] = []
    for row in rows:
        try:
            reports.append(parse_report(row))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Skipping invalid report row: {e}")
            continue
    return reports


def load_destinations(rows: Iterable[Any], use_row_index: bool = False) -> list[Destination]:
    """Parse destinations, skipping invalid rows.

    Indices follow the position in the response unless ``use_row_index`` is
    set and the row carries its own ``index``; duplicate indices are skipped.
    """
    destinations: list[Destination] = []
    seen: set[int] = set()
    for position, row in enumerate(rows):
        try:
            index = _row_index(row, position) if use_row_index else position
            if index in seen:
                raise ValueError(f"duplicate index {index}")
            destinations.append(parse_destination(row, index))
            seen.add(index)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Skipping invalid destination row {position}: {e}")
            continue
    return destinations
