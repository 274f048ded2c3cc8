"""Value objects describing brush strokes and their outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from scipy.spatial.transform import Rotation

from ..surface import Prototype
from ..types import UP, Vec3, as_vec3


class Distribution(str, Enum):
    CENTER = "center"
    POISSON_FREE_SPACE = "poisson_free_space"
    POISSON_ON_SURFACE = "poisson_on_surface"
    SCALE_TO_BRUSH_SIZE = "scale_to_brush_size"


class AutoSimulation(str, Enum):
    NONE = "none"
    ONCE = "once"
    CONTINUOUS = "continuous"


@dataclass(frozen=True)
class BrushParameters:
    """One brush application.

    ``brush_size`` and ``poisson_disc_size`` are diameters; the engine works
    with half of each. ``brush_rotation`` is an extra yaw in degrees.
    """

    position: Vec3
    normal: Vec3 = UP
    brush_size: float = 2.0
    distribution: Distribution = Distribution.CENTER
    poisson_disc_size: float = 1.0
    poisson_disc_raycast_offset: float = 0.0
    allow_overlap: bool = False
    brush_rotation: float = 0.0
    align_to_terrain: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_vec3(self.position))
        object.__setattr__(self, "normal", as_vec3(self.normal))
        object.__setattr__(self, "distribution", Distribution(self.distribution))

    @property
    def brush_radius(self) -> float:
        return self.brush_size * 0.5

    @property
    def disc_radius(self) -> float:
        return self.poisson_disc_size * 0.5


@dataclass
class SpawnSettings:
    """Extra lift applied when objects are dropped by a physics simulation."""

    auto_simulation: AutoSimulation = AutoSimulation.NONE
    height_offset: float = 0.0


@dataclass
class PrototypeSettings:
    """How a prototype is positioned, rotated and scaled when painted.

    Rotation ranges and ``rotation_offset`` are Euler angles in degrees.
    """

    prototype: Prototype
    position_offset: Vec3 = (0.0, 0.0, 0.0)
    change_scale: bool = False
    scale_min: float = 0.5
    scale_max: float = 1.5
    random_rotation: bool = False
    rotation_min: Vec3 = (0.0, 0.0, 0.0)
    rotation_max: Vec3 = (0.0, 360.0, 0.0)
    rotation_offset: Vec3 = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class PlacementTransform:
    position: Vec3
    rotation: Rotation
    scale: Vec3


@dataclass
class Placement:
    prototype: Prototype
    transform: PlacementTransform


@dataclass
class BrushResult:
    """Outcome of one brush application."""

    placed: List[Placement] = field(default_factory=list)
    candidates: int = 0
    rejected_overlap: int = 0
    rejected_target: int = 0
    skipped_no_hit: int = 0
    diagnostics: List[str] = field(default_factory=list)

    @property
    def placed_count(self) -> int:
        return len(self.placed)


__all__ = [
    "Distribution",
    "AutoSimulation",
    "BrushParameters",
    "SpawnSettings",
    "PrototypeSettings",
    "PlacementTransform",
    "Placement",
    "BrushResult",
]
