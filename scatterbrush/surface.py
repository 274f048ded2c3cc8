"""Surfaces, prototypes and vertical ray probing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
from scipy.interpolate import RegularGridInterpolator

from .store.model import InstanceStore
from .types import Vec3, as_vec3

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Prototype:
    """Template an instance refers to.

    ``bounds`` is the axis-aligned size of the unscaled, unrotated object;
    it is what scale-to-brush-size measures. Prototypes compare by identity,
    like the asset handles they stand for.
    """

    name: str
    local_scale: Vec3 = (1.0, 1.0, 1.0)
    bounds: Vec3 = (1.0, 1.0, 1.0)


class PrototypeCatalog:
    """Ordered, read-only list of the prototypes a surface accepts."""

    def __init__(self, prototypes: Iterable[Prototype] = ()) -> None:
        self._prototypes: Tuple[Prototype, ...] = tuple(prototypes)

    def __len__(self) -> int:
        return len(self._prototypes)

    def __iter__(self) -> Iterator[Prototype]:
        return iter(self._prototypes)

    def index_of(self, prototype: Prototype) -> int:
        for idx, candidate in enumerate(self._prototypes):
            if candidate is prototype:
                return idx
        return -1

    def prototype_at(self, index: int) -> Prototype:
        return self._prototypes[index]

    def find(self, name: str) -> Optional[Prototype]:
        for candidate in self._prototypes:
            if candidate.name == name:
                return candidate
        return None


class Surface:
    """Capabilities the engine needs from a bounded height field."""

    name: str
    prototypes: PrototypeCatalog
    instances: InstanceStore

    def footprint(self) -> Tuple[Vec3, Vec3]:
        raise NotImplementedError

    def height_at(self, x: float, z: float) -> float:
        """Height above the surface origin at world ``(x, z)``."""

        raise NotImplementedError

    def world_y_offset(self) -> float:
        return self.footprint()[0][1]


@dataclass(eq=False)
class HeightFieldSurface(Surface):
    """Grid-backed surface.

    ``heights`` holds normalized values in ``[0, 1]``; row ``i`` runs along Z
    and column ``j`` along X. Sampling is bilinear and clamps to the
    footprint edge. ``size[1]`` converts normalized heights to world units.
    """

    origin: Vec3
    size: Vec3
    heights: np.ndarray = field(default_factory=lambda: np.zeros((2, 2)))
    prototypes: PrototypeCatalog = field(default_factory=PrototypeCatalog)
    instances: InstanceStore = field(default_factory=InstanceStore)
    name: str = "surface"

    def __post_init__(self) -> None:
        self.origin = as_vec3(self.origin)
        self.size = as_vec3(self.size)
        grid = np.asarray(self.heights, dtype=float)
        if grid.ndim != 2 or grid.shape[0] < 2 or grid.shape[1] < 2:
            raise ValueError("heights must be a 2D grid of at least 2x2 samples")
        self.heights = grid
        axis_z = np.linspace(0.0, 1.0, grid.shape[0])
        axis_x = np.linspace(0.0, 1.0, grid.shape[1])
        self._interpolator = RegularGridInterpolator((axis_z, axis_x), grid, method="linear")

    @classmethod
    def flat(
        cls,
        origin: Sequence[float],
        size: Sequence[float],
        prototypes: Iterable[Prototype] = (),
        name: str = "surface",
    ) -> "HeightFieldSurface":
        return cls(as_vec3(origin), as_vec3(size), np.zeros((2, 2)), PrototypeCatalog(prototypes), name=name)

    def footprint(self) -> Tuple[Vec3, Vec3]:
        return self.origin, self.size

    def contains(self, x: float, z: float) -> bool:
        lx = (x - self.origin[0]) / self.size[0]
        lz = (z - self.origin[2]) / self.size[2]
        return 0.0 <= lx <= 1.0 and 0.0 <= lz <= 1.0

    def height_at(self, x: float, z: float) -> float:
        lx = min(max((x - self.origin[0]) / self.size[0], 0.0), 1.0)
        lz = min(max((z - self.origin[2]) / self.size[2], 0.0), 1.0)
        value = float(self._interpolator([[lz, lx]])[0])
        return value * self.size[1]


class RayCaster:
    def cast_vertical(self, origin: Sequence[float], direction: Sequence[float]) -> Optional[Vec3]:
        """First hit along a vertical ray, or ``None``."""

        raise NotImplementedError


class SurfaceRayCaster(RayCaster):
    """Casts vertical rays against height-field surfaces."""

    def __init__(self, surfaces: Iterable[HeightFieldSurface]) -> None:
        self.surfaces: List[HeightFieldSurface] = list(surfaces)

    def cast_vertical(self, origin: Sequence[float], direction: Sequence[float]) -> Optional[Vec3]:
        x, y, z = as_vec3(origin)
        downward = float(direction[1]) < 0.0
        best: Optional[float] = None
        for surface in self.surfaces:
            if not surface.contains(x, z):
                continue
            hit_y = surface.height_at(x, z) + surface.world_y_offset()
            if downward and hit_y > y:
                continue
            if not downward and hit_y < y:
                continue
            if best is None or abs(hit_y - y) < abs(best - y):
                best = hit_y
        if best is None:
            return None
        return (x, best, z)


__all__ = [
    "Prototype",
    "PrototypeCatalog",
    "Surface",
    "HeightFieldSurface",
    "RayCaster",
    "SurfaceRayCaster",
]
