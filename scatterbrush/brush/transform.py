"""Position, rotation and scale of a painted object."""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np
from scipy.spatial.transform import Rotation

from ..surface import Prototype
from ..types import UP, Vec3, as_vec3
from .model import AutoSimulation, BrushParameters, Distribution, PlacementTransform, PrototypeSettings, SpawnSettings


def euler_rotation(angles_deg: Sequence[float]) -> Rotation:
    """Rotation from ``(x, y, z)`` degrees applied Z first, then X, then Y."""

    x, y, z = (float(a) for a in angles_deg)
    return Rotation.from_euler("zxy", [z, x, y], degrees=True)


def align_rotation(normal: Sequence[float]) -> Rotation:
    """Shortest rotation taking +Y onto ``normal``."""

    up = np.asarray(UP, dtype=float)
    target = np.asarray(normal, dtype=float)
    length = float(np.linalg.norm(target))
    if length <= 1e-12:
        return Rotation.identity()
    target = target / length
    axis = np.cross(up, target)
    sin_angle = float(np.linalg.norm(axis))
    cos_angle = float(np.clip(np.dot(up, target), -1.0, 1.0))
    if sin_angle <= 1e-12:
        if cos_angle > 0.0:
            return Rotation.identity()
        # antiparallel: any horizontal axis works
        return Rotation.from_rotvec([math.pi, 0.0, 0.0])
    angle = math.atan2(sin_angle, cos_angle)
    return Rotation.from_rotvec(axis / sin_angle * angle)


def apply_height_offset(position: Sequence[float], spawn: SpawnSettings) -> Vec3:
    x, y, z = as_vec3(position)
    if spawn.auto_simulation is AutoSimulation.NONE:
        return (x, y, z)
    return (x, y + spawn.height_offset, z)


def world_bounds(prototype: Prototype, rotation: Rotation) -> np.ndarray:
    """Axis-aligned world size of ``prototype`` at its own scale after ``rotation``."""

    extents = np.asarray(prototype.bounds, dtype=float) * np.asarray(prototype.local_scale, dtype=float)
    return np.abs(rotation.as_matrix()) @ extents


def scale_to_brush_size(prototype: Prototype, rotation: Rotation, brush_size: float) -> Vec3:
    """Uniformly scale so the largest rotated bounds dimension equals ``brush_size``."""

    size = world_bounds(prototype, rotation)
    factor = float(brush_size) / float(size.max())
    return as_vec3(np.asarray(prototype.local_scale, dtype=float) * factor)


def create_applied_transform(
    settings: PrototypeSettings,
    position: Sequence[float],
    normal: Sequence[float],
    params: BrushParameters,
    spawn: SpawnSettings,
    rng: Optional[np.random.Generator] = None,
) -> PlacementTransform:
    rng = rng if rng is not None else np.random.default_rng()

    offset = np.asarray(settings.position_offset, dtype=float)
    new_position = apply_height_offset(np.asarray(position, dtype=float) + offset, spawn)

    # may be replaced again by scale-to-brush-size once the rotation is known
    scale = as_vec3(settings.prototype.local_scale)
    if settings.change_scale:
        uniform = float(rng.uniform(settings.scale_min, settings.scale_max))
        scale = (uniform, uniform, uniform)

    aligned = align_rotation(normal) if params.align_to_terrain else Rotation.identity()
    if settings.random_rotation:
        angles = [float(rng.uniform(lo, hi)) for lo, hi in zip(settings.rotation_min, settings.rotation_max)]
        object_rotation = euler_rotation(angles)
    else:
        object_rotation = euler_rotation(settings.rotation_offset)
    brush_rotation = euler_rotation((0.0, params.brush_rotation, 0.0))
    rotation = aligned * object_rotation * brush_rotation

    if params.distribution is Distribution.SCALE_TO_BRUSH_SIZE:
        scale = scale_to_brush_size(settings.prototype, rotation, params.brush_size)

    return PlacementTransform(position=new_position, rotation=rotation, scale=scale)


__all__ = [
    "euler_rotation",
    "align_rotation",
    "apply_height_offset",
    "world_bounds",
    "scale_to_brush_size",
    "create_applied_transform",
]
