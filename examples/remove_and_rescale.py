"""Example: thin out, rescale and undo edits on a scattered surface."""

import numpy as np

from scatterbrush import (
    BrushDistribution,
    BrushParameters,
    Distribution,
    HeightFieldSurface,
    Prototype,
    PrototypeSettings,
    SnapshotHistory,
    SurfaceInstanceManager,
    SurfaceTarget,
)


def main() -> None:
    grass = Prototype("grass")
    flower = Prototype("flower")
    surface = HeightFieldSurface.flat((0.0, 0.0, 0.0), (100.0, 0.0, 100.0), [grass, flower], name="lawn")

    history = SnapshotHistory(limit=20)
    rng = np.random.default_rng(7)
    manager = SurfaceInstanceManager(surface, undo=history, strategy="sequential", rng=rng)
    engine = BrushDistribution(SurfaceTarget(manager), surface=surface, rng=rng)

    for prototype, center in ((grass, (40.0, 0.0, 50.0)), (flower, (60.0, 0.0, 50.0))):
        params = BrushParameters(center, brush_size=50.0, distribution=Distribution.POISSON_ON_SURFACE,
                                 poisson_disc_size=3.0)
        engine.apply(params, PrototypeSettings(prototype))
    print(f"Painted: {len(surface.instances)}")

    flower_index = manager.get_prototype_index(surface, flower)
    removed = manager.remove_overlapping((50.0, 0.0, 50.0), 20.0, prototype_filter=flower_index)
    print(f"Removed {removed} flower(s) from the middle")

    grown = manager.change_scale((30.0, 0.0, 50.0), 16.0, grow=True, factor=0.5)
    fixed = manager.set_scale((70.0, 0.0, 50.0), 16.0, 0.5, 2.0)
    print(f"Grown: {grown}, set to fixed scale: {fixed}")

    while len(history):
        label = history.undo()
        print(f"Undo '{label}': {len(surface.instances)} instance(s)")


if __name__ == "__main__":
    main()
