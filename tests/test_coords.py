import pytest

from scatterbrush import is_inside_unit_square, local_radius, to_local, to_local_position, to_world


def test_to_local_maps_footprint_to_unit_square():
    origin = (0.0, 0.0, 0.0)
    size = (100.0, 20.0, 100.0)

    assert to_local(origin, size, (50.0, 7.0, 50.0)) == pytest.approx((0.5, 0.5))
    assert to_local(origin, size, (0.0, 0.0, 100.0)) == pytest.approx((0.0, 1.0))
    assert to_local_position(origin, size, (25.0, 3.0, 75.0)) == pytest.approx((0.25, 0.0, 0.75))


def test_round_trip_is_identity_for_offset_footprint():
    origin = (12.5, 3.0, -40.0)
    size = (200.0, 50.0, 80.0)
    for point in [(37.25, 9.0, 11.75), (-100.0, 0.0, 500.0), (12.5, 3.0, -40.0)]:
        local = to_local(origin, size, point)
        assert to_world(origin, size, local, y=point[1]) == pytest.approx(point)


def test_to_world_accepts_instance_positions():
    assert to_world((10.0, 0.0, 10.0), (20.0, 1.0, 40.0), (0.5, 0.0, 0.25)) == pytest.approx((20.0, 0.0, 20.0))


def test_to_local_does_not_clamp():
    local = to_local((0.0, 0.0, 0.0), (100.0, 1.0, 100.0), (-10.0, 0.0, 250.0))

    assert local == pytest.approx((-0.1, 2.5))
    assert not is_inside_unit_square(local)
    assert is_inside_unit_square((0.0, 1.0))
    assert is_inside_unit_square((1.0, 0.0, 0.5))


def test_local_radius_uses_x_extent_only():
    assert local_radius((100.0, 5.0, 400.0), 10.0) == pytest.approx(0.1)
    assert local_radius((400.0, 5.0, 100.0), 10.0) == pytest.approx(0.025)
