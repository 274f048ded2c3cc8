import math

import numpy as np
import pytest
from scipy.spatial.distance import pdist
from scipy.spatial.transform import Rotation

from scatterbrush import (
    AutoSimulation,
    BrushDistribution,
    BrushParameters,
    Distribution,
    HeightFieldSurface,
    ObjectContainer,
    Prototype,
    PrototypeCatalog,
    PrototypeSettings,
    SpawnSettings,
    SurfaceRayCaster,
)
from scatterbrush.brush.model import PlacementTransform
from scatterbrush.brush.targets import SpawnedObject


def _settings():
    return PrototypeSettings(Prototype("shrub", bounds=(1.0, 2.0, 1.0)))


def _sloped_surface(origin=(0.0, 0.0, 0.0)):
    # height rises linearly along Z from 0 to size[1]
    heights = np.array([[0.0, 0.0], [1.0, 1.0]])
    return HeightFieldSurface(origin, (40.0, 10.0, 40.0), heights, PrototypeCatalog(), name="slope")


def test_center_places_single_object_at_brush_position():
    container = ObjectContainer()
    engine = BrushDistribution(container, rng=np.random.default_rng(0))

    result = engine.apply(BrushParameters(position=(3.0, 1.0, 4.0), brush_size=2.0), _settings())

    assert result.candidates == 1
    assert result.placed_count == 1
    assert container.children[0].position == pytest.approx((3.0, 1.0, 4.0))
    assert result.placed[0].prototype is container.children[0].prototype


def test_center_rejects_overlap_unless_allowed():
    container = ObjectContainer()
    engine = BrushDistribution(container, rng=np.random.default_rng(0))
    params = BrushParameters(position=(0.0, 0.0, 0.0), brush_size=4.0)

    engine.apply(params, _settings())
    second = engine.apply(params, _settings())
    forced = engine.apply(
        BrushParameters(position=(0.0, 0.0, 0.0), brush_size=4.0, allow_overlap=True), _settings()
    )

    assert second.placed_count == 0
    assert second.rejected_overlap == 1
    assert forced.placed_count == 1
    assert len(container.children) == 2


def test_container_overlap_boundary_is_inclusive():
    container = ObjectContainer(
        children=[SpawnedObject(Prototype("shrub"), (10.0, 0.0, 0.0), Rotation.identity(), (1.0, 1.0, 1.0))]
    )

    assert container.any_near((0.0, 0.0, 0.0), 10.0)
    assert not container.any_near((0.0, 0.0, 0.0), 9.999)


def test_center_with_height_offset_lifts_once():
    container = ObjectContainer()
    engine = BrushDistribution(
        container, spawn=SpawnSettings(AutoSimulation.ONCE, 2.0), rng=np.random.default_rng(0)
    )

    engine.apply(BrushParameters(position=(1.0, 0.0, 1.0)), _settings())

    assert container.children[0].position == pytest.approx((1.0, 2.0, 1.0))


def test_scale_to_brush_size_places_at_center():
    container = ObjectContainer()
    engine = BrushDistribution(container, rng=np.random.default_rng(0))

    result = engine.apply(
        BrushParameters(position=(0.0, 0.0, 0.0), brush_size=6.0, distribution=Distribution.SCALE_TO_BRUSH_SIZE),
        _settings(),
    )

    assert result.placed_count == 1
    assert container.children[0].scale == pytest.approx((3.0, 3.0, 3.0))


@pytest.mark.parametrize("seed", [1, 2])
def test_poisson_on_surface_spacing_and_heights(seed):
    surface = _sloped_surface()
    container = ObjectContainer()
    engine = BrushDistribution(container, surface=surface, rng=np.random.default_rng(seed))
    params = BrushParameters(
        position=(20.0, 0.0, 20.0),
        brush_size=16.0,
        distribution=Distribution.POISSON_ON_SURFACE,
        poisson_disc_size=4.0,
    )

    result = engine.apply(params, _settings())

    assert result.placed_count > 3
    assert result.rejected_overlap == 0
    positions = np.array([child.position for child in container.children])
    radial = np.hypot(positions[:, 0] - 20.0, positions[:, 2] - 20.0)
    assert np.all(radial <= 8.0 + 1e-9)
    assert pdist(positions[:, [0, 2]]).min() >= 2.0 - 1e-9
    assert positions[:, 1] == pytest.approx(positions[:, 2] / 40.0 * 10.0)


def test_poisson_on_surface_uses_surface_origin_height():
    surface = _sloped_surface(origin=(0.0, 5.0, 0.0))
    container = ObjectContainer()
    engine = BrushDistribution(container, surface=surface, rng=np.random.default_rng(3))

    engine.apply(
        BrushParameters(
            position=(20.0, 0.0, 20.0),
            brush_size=8.0,
            distribution=Distribution.POISSON_ON_SURFACE,
            poisson_disc_size=2.0,
        ),
        _settings(),
    )

    for x, y, z in (child.position for child in container.children):
        assert y == pytest.approx(5.0 + z / 4.0)


def test_poisson_on_surface_without_surface_reports():
    engine = BrushDistribution(ObjectContainer(), rng=np.random.default_rng(0))

    result = engine.apply(
        BrushParameters(position=(0.0, 0.0, 0.0), distribution=Distribution.POISSON_ON_SURFACE), _settings()
    )

    assert result.placed_count == 0
    assert "Surface not found" in result.diagnostics


def test_poisson_skips_samples_near_existing_objects():
    container = ObjectContainer(
        children=[SpawnedObject(Prototype("rock"), (20.0, 0.0, 20.0), Rotation.identity(), (1.0, 1.0, 1.0))]
    )
    surface = HeightFieldSurface.flat((0.0, 0.0, 0.0), (40.0, 0.0, 40.0))
    engine = BrushDistribution(container, surface=surface, rng=np.random.default_rng(5))

    result = engine.apply(
        BrushParameters(
            position=(20.0, 0.0, 20.0),
            brush_size=12.0,
            distribution=Distribution.POISSON_ON_SURFACE,
            poisson_disc_size=3.0,
        ),
        _settings(),
    )

    new = container.children[1:]
    assert len(new) == result.placed_count
    for child in new:
        assert math.dist(child.position, (20.0, 0.0, 20.0)) > 1.5


def test_poisson_free_space_without_ray_caster_reports():
    engine = BrushDistribution(ObjectContainer(), rng=np.random.default_rng(0))

    result = engine.apply(
        BrushParameters(position=(0.0, 0.0, 0.0), distribution=Distribution.POISSON_FREE_SPACE), _settings()
    )

    assert result.placed_count == 0
    assert result.diagnostics == ["No ray caster configured"]


def test_poisson_free_space_casts_up_when_nothing_below():
    surface = HeightFieldSurface.flat((0.0, 5.0, 0.0), (40.0, 0.0, 40.0))
    container = ObjectContainer()
    engine = BrushDistribution(container, ray_caster=SurfaceRayCaster([surface]), rng=np.random.default_rng(4))

    result = engine.apply(
        BrushParameters(
            position=(20.0, 0.0, 20.0),
            brush_size=10.0,
            distribution=Distribution.POISSON_FREE_SPACE,
            poisson_disc_size=2.0,
        ),
        _settings(),
    )

    assert result.placed_count > 0
    assert result.skipped_no_hit == 0
    assert all(child.position[1] == pytest.approx(5.0) for child in container.children)


def test_poisson_free_space_raycast_offset_prefers_higher_surface():
    low = HeightFieldSurface.flat((0.0, 0.0, 0.0), (40.0, 0.0, 40.0), name="low")
    high = HeightFieldSurface.flat((0.0, 3.0, 0.0), (40.0, 0.0, 40.0), name="high")
    container = ObjectContainer()
    engine = BrushDistribution(container, ray_caster=SurfaceRayCaster([low, high]), rng=np.random.default_rng(4))

    engine.apply(
        BrushParameters(
            position=(20.0, 1.0, 20.0),
            brush_size=6.0,
            distribution=Distribution.POISSON_FREE_SPACE,
            poisson_disc_size=2.0,
            poisson_disc_raycast_offset=10.0,
        ),
        _settings(),
    )

    assert container.children
    assert all(child.position[1] == pytest.approx(3.0) for child in container.children)


def test_poisson_free_space_counts_misses():
    surface = HeightFieldSurface.flat((0.0, 0.0, 0.0), (10.0, 0.0, 10.0))
    container = ObjectContainer()
    engine = BrushDistribution(container, ray_caster=SurfaceRayCaster([surface]), rng=np.random.default_rng(4))

    result = engine.apply(
        BrushParameters(
            position=(500.0, 0.0, 500.0),
            brush_size=10.0,
            distribution=Distribution.POISSON_FREE_SPACE,
            poisson_disc_size=2.0,
        ),
        _settings(),
    )

    assert result.candidates > 0
    assert result.skipped_no_hit == result.candidates
    assert container.children == []


def test_same_seed_reproduces_stroke():
    def run(seed):
        container = ObjectContainer()
        engine = BrushDistribution(container, surface=_sloped_surface(), rng=np.random.default_rng(seed))
        engine.apply(
            BrushParameters(
                position=(20.0, 0.0, 20.0),
                brush_size=10.0,
                distribution=Distribution.POISSON_ON_SURFACE,
                poisson_disc_size=2.0,
            ),
            _settings(),
        )
        return [child.position for child in container.children]

    assert run(11) == run(11)


def test_rejecting_target_is_counted():
    class FullTarget(ObjectContainer):
        def place(self, settings, transform: PlacementTransform, spacing):
            return False

    engine = BrushDistribution(FullTarget(), rng=np.random.default_rng(0))

    result = engine.apply(BrushParameters(position=(0.0, 0.0, 0.0)), _settings())

    assert result.placed_count == 0
    assert result.rejected_target == 1
