import math

import numpy as np
import pytest
from scipy.spatial.transform import Rotation

from scatterbrush import AutoSimulation, BrushParameters, Distribution, Prototype, PrototypeSettings, SpawnSettings
from scatterbrush.brush.transform import (
    align_rotation,
    apply_height_offset,
    create_applied_transform,
    euler_rotation,
    scale_to_brush_size,
    world_bounds,
)
from scatterbrush.store.manager import yaw_radians


@pytest.mark.parametrize(
    "normal",
    [(1.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.3, 0.9, 0.1), (0.0, 5.0, 0.0), (0.2, -1.0, 0.0)],
)
def test_align_rotation_maps_up_onto_normal(normal):
    rotation = align_rotation(normal)
    expected = np.asarray(normal) / np.linalg.norm(normal)

    assert np.allclose(rotation.apply((0.0, 1.0, 0.0)), expected)


def test_align_rotation_degenerate_normals():
    assert np.allclose(align_rotation((0.0, 0.0, 0.0)).as_matrix(), np.eye(3))
    assert np.allclose(align_rotation((0.0, 1.0, 0.0)).as_matrix(), np.eye(3))
    assert np.allclose(align_rotation((0.0, -2.0, 0.0)).apply((0.0, 1.0, 0.0)), (0.0, -1.0, 0.0))


def test_euler_rotation_order_is_z_then_x_then_y():
    angles = (20.0, 35.0, 50.0)
    expected = (
        Rotation.from_euler("y", 35.0, degrees=True)
        * Rotation.from_euler("x", 20.0, degrees=True)
        * Rotation.from_euler("z", 50.0, degrees=True)
    )

    assert np.allclose(euler_rotation(angles).as_matrix(), expected.as_matrix())
    assert yaw_radians(euler_rotation((0.0, 90.0, 0.0))) == pytest.approx(math.pi / 2)


def test_height_offset_only_with_auto_simulation():
    assert apply_height_offset((1.0, 2.0, 3.0), SpawnSettings()) == (1.0, 2.0, 3.0)
    assert apply_height_offset((1.0, 2.0, 3.0), SpawnSettings(AutoSimulation.ONCE, 1.5)) == (1.0, 3.5, 3.0)
    assert apply_height_offset((1.0, 2.0, 3.0), SpawnSettings(AutoSimulation.CONTINUOUS, 0.5)) == (1.0, 2.5, 3.0)


def test_world_bounds_follow_rotation():
    prototype = Prototype("rock", local_scale=(2.0, 1.0, 1.0), bounds=(1.0, 3.0, 0.5))
    quarter_turn = Rotation.from_euler("z", 90.0, degrees=True)

    assert np.allclose(world_bounds(prototype, Rotation.identity()), (2.0, 3.0, 0.5))
    assert np.allclose(world_bounds(prototype, quarter_turn), (3.0, 2.0, 0.5))


@pytest.mark.parametrize("rotation", [Rotation.identity(), Rotation.from_euler("xyz", [30.0, 60.0, 10.0], degrees=True)])
def test_scale_to_brush_size_fits_largest_dimension(rotation):
    prototype = Prototype("rock", local_scale=(1.0, 1.0, 1.0), bounds=(2.0, 4.0, 1.0))

    scale = scale_to_brush_size(prototype, rotation, 8.0)
    scaled = Prototype("scaled", local_scale=scale, bounds=prototype.bounds)

    assert scale[0] == pytest.approx(scale[1])
    assert scale[1] == pytest.approx(scale[2])
    assert world_bounds(scaled, rotation).max() == pytest.approx(8.0)


def test_scale_to_brush_size_keeps_local_scale_ratio():
    prototype = Prototype("rock", local_scale=(1.0, 2.0, 1.0), bounds=(2.0, 2.0, 2.0))

    scale = scale_to_brush_size(prototype, Rotation.identity(), 8.0)

    assert scale == pytest.approx((2.0, 4.0, 2.0))


def _settings(**kwargs):
    return PrototypeSettings(Prototype("oak", local_scale=(1.0, 2.0, 1.0)), **kwargs)


def test_transform_applies_offset_and_lift():
    params = BrushParameters(position=(5.0, 0.0, 5.0))
    spawn = SpawnSettings(AutoSimulation.ONCE, 2.0)

    transform = create_applied_transform(
        _settings(position_offset=(0.0, 0.5, 1.0)), params.position, params.normal, params, spawn
    )

    assert transform.position == pytest.approx((5.0, 2.5, 6.0))
    assert transform.scale == (1.0, 2.0, 1.0)
    assert np.allclose(transform.rotation.as_matrix(), np.eye(3))


def test_transform_random_scale_is_uniform_and_in_range():
    params = BrushParameters(position=(0.0, 0.0, 0.0))
    rng = np.random.default_rng(3)

    for _ in range(20):
        transform = create_applied_transform(
            _settings(change_scale=True, scale_min=0.5, scale_max=0.75),
            params.position,
            params.normal,
            params,
            SpawnSettings(),
            rng,
        )
        x, y, z = transform.scale
        assert x == y == z
        assert 0.5 <= x <= 0.75


def test_transform_composes_object_rotation_and_brush_yaw():
    params = BrushParameters(position=(0.0, 0.0, 0.0), brush_rotation=45.0)

    transform = create_applied_transform(
        _settings(rotation_offset=(0.0, 30.0, 0.0)), params.position, params.normal, params, SpawnSettings()
    )

    assert math.degrees(yaw_radians(transform.rotation)) == pytest.approx(75.0)


def test_random_rotation_stays_in_range():
    params = BrushParameters(position=(0.0, 0.0, 0.0))
    rng = np.random.default_rng(8)

    for _ in range(20):
        transform = create_applied_transform(
            _settings(random_rotation=True, rotation_min=(0.0, 10.0, 0.0), rotation_max=(0.0, 80.0, 0.0)),
            params.position,
            params.normal,
            params,
            SpawnSettings(),
            rng,
        )
        assert 10.0 - 1e-6 <= math.degrees(yaw_radians(transform.rotation)) <= 80.0 + 1e-6


def test_transform_aligns_to_terrain_when_requested():
    normal = (1.0, 1.0, 0.0)
    aligned = BrushParameters(position=(0.0, 0.0, 0.0), normal=normal, align_to_terrain=True)
    upright = BrushParameters(position=(0.0, 0.0, 0.0), normal=normal)

    tilted = create_applied_transform(_settings(), aligned.position, aligned.normal, aligned, SpawnSettings())
    straight = create_applied_transform(_settings(), upright.position, upright.normal, upright, SpawnSettings())

    assert np.allclose(tilted.rotation.apply((0.0, 1.0, 0.0)), np.asarray(normal) / math.sqrt(2.0))
    assert np.allclose(straight.rotation.apply((0.0, 1.0, 0.0)), (0.0, 1.0, 0.0))


def test_scale_to_brush_distribution_overrides_scale():
    settings = PrototypeSettings(Prototype("rock", bounds=(1.0, 4.0, 1.0)), change_scale=True)
    params = BrushParameters(position=(0.0, 0.0, 0.0), brush_size=2.0, distribution=Distribution.SCALE_TO_BRUSH_SIZE)

    transform = create_applied_transform(settings, params.position, params.normal, params, SpawnSettings())

    assert transform.scale == pytest.approx((0.5, 0.5, 0.5))
