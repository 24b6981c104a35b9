from aquamap.models.domain import (
    Destination,
    MarkerKind,
    Point,
    PolylineKind,
    Report,
    ViewportState,
)
from aquamap.services.rendering import assemble, select_visible_destinations
from aquamap.services.selection import Selection

HOME = Point(3.0, 101.0)


def _viewport(budget: int = 15) -> ViewportState:
    return ViewportState(zoom=13.0, marker_budget=budget, center=HOME)


def _destinations() -> list[Destination]:
    return [
        Destination(
            index=0,
            location=Point(3.0, 101.3),
            distance_km=9.0,
            polyline=(HOME, Point(3.01, 101.15), Point(3.0, 101.3)),
            name="Hillside Tank",
        ),
        Destination(
            index=1,
            location=Point(3.0, 101.1),
            distance_km=2.5,
            polyline=(HOME, Point(3.01, 101.05), Point(3.0, 101.1)),
        ),
        Destination(index=2, location=Point(3.0, 101.2), distance_km=5.0),
    ]


def _reports() -> list[Report]:
    return [
        Report(id="R1", location=Point(3.05, 101.12), title="Cloudy tap water"),
        Report(id="R2", location=None),
    ]


def _routes(result):
    return [p for p in result.polylines if p.kind is PolylineKind.ROUTE]


def _connections(result):
    return [p for p in result.polylines if p.kind is PolylineKind.CONNECTION]


def _destination_markers(result):
    return [m for m in result.markers if m.kind is MarkerKind.DESTINATION]


def test_empty_input_renders_nothing():
    result = assemble([], [], None, _viewport())

    assert result.markers == []
    assert result.polylines == []
    assert result.shortest_route_index is None


def test_shortest_route_is_drawn_last():
    result = assemble(_reports(), _destinations(), None, _viewport(), current_location=HOME)

    last = result.polylines[-1]
    assert result.shortest_route_index == 1
    assert last.kind is PolylineKind.ROUTE
    assert last.destination_index == 1
    assert last.style.z_index == 2


def test_shortest_route_stays_last_with_report_selected():
    result = assemble(_reports(), _destinations(), Selection.report("R1"), _viewport(), current_location=HOME)

    assert result.polylines[-1].destination_index == 1
    assert all(p.style.z_index == 1 for p in _connections(result))


def test_draw_list_is_ordered_by_z_index():
    result = assemble(_reports(), _destinations(), Selection.report("R1"), _viewport(), current_location=HOME)

    z_values = [p.style.z_index for p in result.polylines]
    assert z_values == sorted(z_values)
    marker_z = [m.style.z_index for m in result.markers]
    assert marker_z == sorted(marker_z)


def test_route_without_geometry_falls_back_to_straight_line():
    result = assemble([], _destinations(), None, _viewport(), current_location=HOME)

    route = next(p for p in _routes(result) if p.destination_index == 2)
    assert route.points == (HOME, Point(3.0, 101.2))


def test_route_without_geometry_or_origin_is_skipped():
    result = assemble([], _destinations(), None, _viewport())

    assert sorted(p.destination_index for p in _routes(result)) == [0, 1]
    assert len(_destination_markers(result)) == 3


def test_marker_budget_keeps_shortest_and_nearest():
    result = assemble(_reports(), _destinations(), None, _viewport(budget=2), current_location=HOME)

    assert [m.entity_id for m in _destination_markers(result)] == ["2", "1"]
    assert {p.destination_index for p in _connections(result)} == {1, 2}


def test_selected_route_is_shown_alone():
    result = assemble(_reports(), _destinations(), Selection.route(2), _viewport(), current_location=HOME)

    assert [m.entity_id for m in _destination_markers(result)] == ["2"]
    assert [p.destination_index for p in result.polylines] == [2, 2]
    assert all(p.style.z_index == 1 for p in result.polylines)


def test_connections_follow_report_ranking():
    result = assemble(_reports(), _destinations(), None, _viewport(), connections_per_report=2)

    connections = _connections(result)
    assert [(p.destination_index, p.rank) for p in connections] == [(1, 0), (2, 1)]
    assert all(p.report_id == "R1" for p in connections)
    assert connections[0].points == (Point(3.05, 101.12), Point(3.0, 101.1))


def test_unlocated_reports_are_listed_not_drawn():
    result = assemble(_reports(), _destinations(), None, _viewport())

    assert result.unlocated_report_ids == ["R2"]
    assert [m.entity_id for m in result.markers if m.kind is MarkerKind.REPORT] == ["R1"]


def test_markers_carry_labels_badges_and_taps():
    result = assemble(_reports(), _destinations(), None, _viewport(), current_location=HOME, podium_ranks=3)

    markers = {m.entity_id: m for m in _destination_markers(result)}
    assert markers["1"].badge == "gold"
    assert markers["2"].badge == "silver"
    assert markers["0"].badge == "bronze"
    assert markers["0"].label == "Hillside Tank (9.0 km)"
    assert markers["1"].label == "Water Supply 2 (2.5 km)"
    assert markers["2"].tap.route_index == 2

    report_marker = next(m for m in result.markers if m.kind is MarkerKind.REPORT)
    assert report_marker.tap.report_id == "R1"
    assert report_marker.label == "Cloudy tap water"
    assert any(m.kind is MarkerKind.CURRENT_LOCATION for m in result.markers)


def test_visible_destinations_put_shortest_first():
    visible = select_visible_destinations([3, 1, 2], 1, Selection.none(), 2)

    assert visible == [1, 3]


def test_visible_destinations_ignore_unknown_selection():
    assert select_visible_destinations([3, 1], 1, Selection.route(9), 5) == []
