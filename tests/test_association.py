import pytest

from aquamap.models.domain import Destination, Point, Report
from aquamap.services.association import (
    compute_all_connections,
    compute_connections,
    find_shortest_route_index,
    rank_destinations,
)


def _report(rid: str, lat: float | None, lon: float | None) -> Report:
    location = Point(lat, lon) if lat is not None and lon is not None else None
    return Report(id=rid, location=location)


def _destination(index: int, lat: float, lon: float, distance: float) -> Destination:
    return Destination(index=index, location=Point(lat, lon), distance_km=distance)


def test_nearest_destination_ranks_first():
    r1 = _report("R1", 1.0, 1.0)
    d1 = _destination(0, 1.0, 1.0, 0.0)
    d2 = _destination(1, 1.0, 1.1, 11.1)

    assert find_shortest_route_index([d1, d2]) == 0

    connections = compute_connections(r1, [d1, d2], 5)
    assert [(c.destination.index, c.rank) for c in connections] == [(0, 0), (1, 1)]
    assert connections[0].distance_km == 0.0
    assert connections[1].distance_km == pytest.approx(11.12, abs=0.01)


def test_connections_are_ordered_by_distance_and_capped():
    report = _report("R1", 3.0, 101.0)
    destinations = [
        _destination(0, 3.0, 101.5, 60.0),
        _destination(1, 3.0, 101.1, 12.0),
        _destination(2, 3.0, 101.3, 35.0),
        _destination(3, 3.0, 101.2, 22.0),
    ]

    connections = compute_connections(report, destinations, max_connections=3)

    assert [c.destination.index for c in connections] == [1, 3, 2]
    assert [c.rank for c in connections] == [0, 1, 2]
    distances = [c.distance_km for c in connections]
    assert distances == sorted(distances)


def test_equal_distances_keep_input_order():
    report = _report("R1", 3.0, 101.0)
    destinations = [
        _destination(5, 3.1, 101.0, 10.0),
        _destination(2, 3.1, 101.0, 10.0),
    ]

    connections = compute_connections(report, destinations)

    assert [c.destination.index for c in connections] == [5, 2]


def test_unlocated_destinations_are_skipped():
    report = _report("R1", 3.0, 101.0)
    destinations = [
        Destination(index=0, location=None, distance_km=1.0),
        Destination(index=1, location=Point(0.0, 0.0), distance_km=2.0),
        _destination(2, 3.0, 101.2, 22.0),
    ]

    connections = compute_connections(report, destinations)

    assert [c.destination.index for c in connections] == [2]
    assert connections[0].rank == 0


def test_unlocated_report_has_no_connections():
    assert compute_connections(_report("R1", None, None), [_destination(0, 1.0, 1.0, 0.0)]) == []


def test_no_destinations_means_no_connections():
    assert compute_connections(_report("R1", 1.0, 1.0), []) == []


def test_max_connections_must_be_positive():
    with pytest.raises(ValueError):
        compute_connections(_report("R1", 1.0, 1.0), [], max_connections=0)


def test_all_connections_skip_unlocated_reports():
    reports = [_report("R1", 1.0, 1.0), _report("R2", None, None)]
    destinations = [_destination(0, 1.0, 1.05, 5.0)]

    connections = compute_all_connections(reports, destinations, 2)

    assert list(connections) == ["R1"]


def test_shortest_route_matches_minimum_distance():
    destinations = [
        _destination(0, 3.0, 101.5, 8.4),
        _destination(1, 3.0, 101.1, 2.5),
        _destination(2, 3.0, 101.3, 4.0),
    ]

    shortest = find_shortest_route_index(destinations)

    assert shortest == 1
    assert destinations[shortest].distance_km == min(d.distance_km for d in destinations)


def test_shortest_route_tie_goes_to_first_encountered():
    destinations = [
        _destination(4, 3.0, 101.5, 2.5),
        _destination(7, 3.0, 101.1, 2.5),
    ]

    assert find_shortest_route_index(destinations) == 4


def test_shortest_route_of_nothing_is_none():
    assert find_shortest_route_index([]) is None
    assert find_shortest_route_index([Destination(index=0, location=None, distance_km=1.0)]) is None


def test_rank_destinations_by_route_distance():
    destinations = [
        _destination(0, 3.0, 101.5, 8.4),
        _destination(1, 3.0, 101.1, 2.5),
        Destination(index=2, location=None, distance_km=0.1),
        _destination(3, 3.0, 101.3, 4.0),
    ]

    assert rank_destinations(destinations) == [1, 3, 0]


def test_non_finite_route_distance_is_ignored():
    destinations = [
        _destination(0, 3.0, 101.1, float("nan")),
        _destination(1, 3.0, 101.2, 2.0),
        _destination(2, 3.0, 101.3, float("inf")),
        _destination(3, 3.0, 101.4, 1.5),
    ]

    assert find_shortest_route_index(destinations) == 3
    assert rank_destinations(destinations) == [3, 1]
    connections = compute_connections(_report("R1", 3.0, 101.0), destinations)
    assert [c.destination.index for c in connections] == [1, 3]
