"""Nearest water-supply association for reports."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from ...models.domain import Connection, Destination, Report
from ..geospatial import distance_km, is_valid_point

logger = logging.getLogger(__name__)


def valid_destinations(destinations: Sequence[Destination]) -> list[Destination]:
    """Destinations that can be ranked.

    Unlocated ones and those without a finite route distance are dropped, not penalised.
    """
    return [
        destination
        for destination in destinations
        if is_valid_point(destination.location) and math.isfinite(destination.distance_km)
    ]


def compute_connections(
    report: Report,
    destinations: Sequence[Destination],
    max_connections: int = 5,
) -> list[Connection]:
    """Connect ``report`` to its ``max_connections`` nearest destinations.

    Destinations are ranked by great-circle distance from the report. The sort
    is stable, so equally distant destinations keep their input order. Rank 0
    is the nearest destination for this report.
    """
    if max_connections < 1:
        raise ValueError("max_connections must be >= 1")

    if not is_valid_point(report.location):
        logger.debug("Report %s has no usable location, leaving it unconnected", report.id)
        return []

    candidates = valid_destinations(destinations)
    if not candidates:
        return []

    measured = [(distance_km(report.location, destination.location), destination) for destination in candidates]
    measured.sort(key=lambda item: item[0])

    return [
        Connection(
            report_id=report.id,
            destination=destination,
            rank=rank,
            distance_km=distance,
        )
        for rank, (distance, destination) in enumerate(measured[:max_connections])
    ]


def compute_all_connections(
    reports: Sequence[Report],
    destinations: Sequence[Destination],
    max_connections: int = 5,
) -> dict[str, list[Connection]]:
    """Connections for every located report, keyed by report id."""
    connections: dict[str, list[Connection]] = {}
    for report in reports:
        if not is_valid_point(report.location):
            continue
        connections[report.id] = compute_connections(report, destinations, max_connections)
    return connections


def find_shortest_route_index(destinations: Sequence[Destination]) -> int | None:
    """Index of the destination with the smallest precomputed route distance.

    Linear scan, first encountered wins ties.
    """
    shortest_index: int | None = None
    shortest_distance = 0.0
    for destination in valid_destinations(destinations):
        if shortest_index is None or destination.distance_km < shortest_distance:
            shortest_index = destination.index
            shortest_distance = destination.distance_km
    return shortest_index


def rank_destinations(destinations: Sequence[Destination]) -> list[int]:
    """Destination indices ordered by ascending route distance (stable)."""
    ordered = sorted(valid_destinations(destinations), key=lambda destination: destination.distance_km)
    return [destination.index for destination in ordered]
