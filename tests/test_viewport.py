import pytest

from aquamap.models.domain import Point
from aquamap.services.viewport import ViewportController, marker_budget_for_zoom


def _viewport(**overrides) -> ViewportController:
    options = dict(
        min_zoom=8.0,
        max_zoom=18.0,
        initial_zoom=13.0,
        entity_zoom=15.0,
        zoom_step=1.0,
        tiers=((15.0, 25), (13.0, 15)),
        floor_budget=10,
        padding_fraction=0.1,
        fallback_delta=0.01,
        default_center=Point(3.139, 101.6869),
    )
    options.update(overrides)
    return ViewportController(**options)


@pytest.mark.parametrize("zoom,budget", [(16.0, 25), (15.0, 25), (14.0, 15), (13.0, 15), (10.0, 10)])
def test_marker_budget_tiers(zoom, budget):
    assert marker_budget_for_zoom(zoom, ((15.0, 25), (13.0, 15)), 10) == budget


def test_marker_budget_uses_configured_defaults():
    assert marker_budget_for_zoom(16.0) == 25
    assert marker_budget_for_zoom(14.0) == 15
    assert marker_budget_for_zoom(10.0) == 10


def test_zoom_change_updates_budget():
    viewport = _viewport()

    state = viewport.on_zoom_changed(16.0)

    assert state.zoom == 16.0
    assert state.marker_budget == 25


def test_zoom_in_stops_at_max():
    viewport = _viewport(initial_zoom=16.0)

    assert viewport.zoom_in()
    assert viewport.zoom_in()
    assert viewport.zoom == 18.0
    assert not viewport.can_zoom_in

    assert viewport.zoom_in() is False
    assert viewport.zoom == 18.0


def test_zoom_out_stops_at_min():
    viewport = _viewport(initial_zoom=8.5)

    assert viewport.zoom_out()
    assert viewport.zoom == 8.0
    assert viewport.zoom_out() is False
    assert viewport.zoom == 8.0


def test_zoom_is_clamped():
    viewport = _viewport()

    assert viewport.on_zoom_changed(25.0).zoom == 18.0
    assert viewport.on_zoom_changed(2.0).zoom == 8.0


def test_invalid_zoom_range():
    with pytest.raises(ValueError):
        _viewport(min_zoom=12.0, max_zoom=10.0)


def test_fit_without_points_uses_default_center():
    viewport = _viewport()

    fit = viewport.fit_to_points([])

    assert fit.south_west.latitude == pytest.approx(3.129)
    assert fit.south_west.longitude == pytest.approx(101.6769)
    assert fit.north_east.latitude == pytest.approx(3.149)
    assert fit.north_east.longitude == pytest.approx(101.6969)


def test_fit_single_point_uses_fixed_box():
    viewport = _viewport()

    fit = viewport.fit_to_points([Point(2.0, 100.0), None, Point(0.0, 0.0)])

    assert fit.south_west.latitude == pytest.approx(1.99)
    assert fit.north_east.longitude == pytest.approx(100.01)
    assert viewport.center.latitude == pytest.approx(2.0)


def test_fit_pads_bounds():
    viewport = _viewport()

    fit = viewport.fit_to_points([Point(1.0, 100.0), Point(2.0, 101.0)])

    assert fit.south_west.latitude == pytest.approx(0.9)
    assert fit.north_east.longitude == pytest.approx(101.1)
    assert fit.padding_fraction == 0.1


def test_latest_fit_wins():
    viewport = _viewport()

    viewport.fit_to_points([Point(1.0, 100.0), Point(2.0, 101.0)])
    latest = viewport.fit_to_points([Point(5.0, 110.0), Point(6.0, 111.0)])

    assert viewport.take_pending_fit() == latest
    assert viewport.take_pending_fit() is None


def test_center_on_entity_zooms_in():
    viewport = _viewport()

    state = viewport.center_on_entity(Point(3.0, 101.0))

    assert state.center == Point(3.0, 101.0)
    assert state.zoom == 15.0
    assert state.marker_budget == 25


def test_fit_points_on_one_latitude_has_height():
    viewport = _viewport()

    fit = viewport.fit_to_points([Point(2.0, 100.0), Point(2.0, 101.0)])

    assert fit.south_west.latitude == pytest.approx(1.99)
    assert fit.north_east.latitude == pytest.approx(2.01)
    assert fit.south_west.longitude == pytest.approx(99.9)
    assert fit.north_east.longitude == pytest.approx(101.1)


def test_fit_points_on_one_longitude_has_width():
    viewport = _viewport()

    fit = viewport.fit_to_points([Point(1.0, 100.0), Point(2.0, 100.0)])

    assert fit.south_west.longitude == pytest.approx(99.99)
    assert fit.north_east.longitude == pytest.approx(100.01)
