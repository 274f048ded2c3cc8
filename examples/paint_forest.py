"""Example: paint two prototypes onto a hilly surface and list the result."""

import numpy as np

from scatterbrush import (
    BrushDistribution,
    BrushParameters,
    Distribution,
    HeightFieldSurface,
    Prototype,
    PrototypeCatalog,
    PrototypeSettings,
    SnapshotHistory,
    SurfaceInstanceManager,
    SurfaceRayCaster,
    SurfaceTarget,
    export_instances,
)

HEIGHTS = np.array(
    [
        [0.0, 0.2, 0.4, 0.2],
        [0.1, 0.6, 0.8, 0.3],
        [0.0, 0.4, 1.0, 0.5],
        [0.0, 0.1, 0.3, 0.2],
    ]
)


def main() -> None:
    oak = Prototype("oak", bounds=(4.0, 12.0, 4.0))
    birch = Prototype("birch", bounds=(2.0, 14.0, 2.0))
    surface = HeightFieldSurface(
        (0.0, 0.0, 0.0), (256.0, 60.0, 256.0), HEIGHTS, PrototypeCatalog([oak, birch]), name="hills"
    )

    rng = np.random.default_rng(123)
    manager = SurfaceInstanceManager(surface, undo=SnapshotHistory(), rng=rng)
    engine = BrushDistribution(
        SurfaceTarget(manager, random_color=True, color_adjustment=0.25),
        ray_caster=SurfaceRayCaster([surface]),
        surface=surface,
        rng=rng,
    )

    strokes = [
        (oak, BrushParameters((90.0, 0.0, 90.0), brush_size=80.0,
                              distribution=Distribution.POISSON_ON_SURFACE, poisson_disc_size=10.0)),
        (birch, BrushParameters((160.0, 100.0, 150.0), brush_size=60.0,
                                distribution=Distribution.POISSON_FREE_SPACE, poisson_disc_size=8.0)),
        (oak, BrushParameters((200.0, 0.0, 40.0), brush_size=12.0)),
    ]
    for prototype, params in strokes:
        settings = PrototypeSettings(prototype, change_scale=True, scale_min=0.8, scale_max=1.3, random_rotation=True)
        result = engine.apply(params, settings)
        print(
            f"{prototype.name} {params.distribution.value}: "
            f"{result.placed_count} placed of {result.candidates} candidate(s)"
        )

    manager.log_prototypes()
    payload = export_instances(surface)
    print(f"\nInstances on {payload['surface']}: {len(payload['instances'])}")
    for record in payload["instances"][:10]:
        x, y, z = record["world"]
        print(f"  {record['prototype']}: ({x:.2f}, {y:.2f}, {z:.2f}) h={record['height_scale']:.2f}")


if __name__ == "__main__":
    main()
