"""Report to water-supply association."""

from .engine import (
    compute_all_connections,
    compute_connections,
    find_shortest_route_index,
    rank_destinations,
    valid_destinations,
)

__all__ = [
    "compute_connections",
    "compute_all_connections",
    "find_shortest_route_index",
    "rank_destinations",
    "valid_destinations",
]
