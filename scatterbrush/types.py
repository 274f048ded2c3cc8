from __future__ import annotations

from typing import Tuple

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]
Color = Tuple[float, float, float, float]

UP: Vec3 = (0.0, 1.0, 0.0)
DOWN: Vec3 = (0.0, -1.0, 0.0)
WHITE: Color = (1.0, 1.0, 1.0, 1.0)

# Prototype filter value meaning "match every prototype".
NO_FILTER = -1


def as_vec3(value: object) -> Vec3:
    """Coerce a 3-element sequence into a float triple."""

    x, y, z = value  # type: ignore[misc]
    return (float(x), float(y), float(z))


__all__ = [
    "Vec2",
    "Vec3",
    "Color",
    "UP",
    "DOWN",
    "WHITE",
    "NO_FILTER",
    "as_vec3",
]
