"""Brush distribution engine: turns brush strokes into placed objects."""

from .distribution import BrushDistribution
from .model import (
    AutoSimulation,
    BrushParameters,
    BrushResult,
    Distribution,
    Placement,
    PlacementTransform,
    PrototypeSettings,
    SpawnSettings,
)
from .targets import ObjectContainer, PlacementTarget, SpawnedObject, SurfaceTarget
from .transform import (
    align_rotation,
    create_applied_transform,
    euler_rotation,
    scale_to_brush_size,
    world_bounds,
)

__all__ = [
    "AutoSimulation",
    "BrushDistribution",
    "BrushParameters",
    "BrushResult",
    "Distribution",
    "ObjectContainer",
    "Placement",
    "PlacementTarget",
    "PlacementTransform",
    "PrototypeSettings",
    "SpawnSettings",
    "SpawnedObject",
    "SurfaceTarget",
    "align_rotation",
    "create_applied_transform",
    "euler_rotation",
    "scale_to_brush_size",
    "world_bounds",
]
