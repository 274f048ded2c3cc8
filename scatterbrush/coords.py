"""Mapping between world space and a surface's normalized local space.

Local space is the unit square over the surface footprint: ``x`` follows the
world X axis and ``z`` the world Z axis, height is not part of it. Nothing
here clamps; callers decide whether a result outside ``[0, 1]`` is a reject.
"""

from __future__ import annotations

from typing import Sequence

from .types import Vec2, Vec3


def to_local(origin: Sequence[float], size: Sequence[float], world: Sequence[float]) -> Vec2:
    """Return the normalized ``(x, z)`` of ``world`` on a footprint."""

    x = (float(world[0]) - float(origin[0])) / float(size[0])
    z = (float(world[2]) - float(origin[2])) / float(size[2])
    return (x, z)


def to_local_position(origin: Sequence[float], size: Sequence[float], world: Sequence[float]) -> Vec3:
    """Like :func:`to_local` but in the ``(x, 0, z)`` layout stored on instances."""

    x, z = to_local(origin, size, world)
    return (x, 0.0, z)


def to_world(
    origin: Sequence[float],
    size: Sequence[float],
    local: Sequence[float],
    y: float = 0.0,
) -> Vec3:
    """Inverse of :func:`to_local`.

    ``local`` may be ``(x, z)`` or an instance position ``(x, _, z)``.
    """

    if len(local) == 3:
        lx, lz = float(local[0]), float(local[2])
    else:
        lx, lz = float(local[0]), float(local[1])
    return (
        float(origin[0]) + lx * float(size[0]),
        float(y),
        float(origin[2]) + lz * float(size[2]),
    )


def local_radius(size: Sequence[float], distance: float) -> float:
    """Convert a world distance into local units.

    Only the X extent is used, which is exact for square footprints and an
    approximation otherwise.
    """

    return float(distance) / float(size[0])


def is_inside_unit_square(local: Sequence[float]) -> bool:
    if len(local) == 3:
        x, z = local[0], local[2]
    else:
        x, z = local[0], local[1]
    return 0.0 <= x <= 1.0 and 0.0 <= z <= 1.0


__all__ = [
    "to_local",
    "to_local_position",
    "to_world",
    "local_radius",
    "is_inside_unit_square",
]
