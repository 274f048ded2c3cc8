"""Where painted objects end up.

A placement target answers "is something already here?" and accepts new
objects. The object container keeps free-standing objects in world space;
the surface target forwards to a surface's instance store. The two hold
different kinds of data: the container compares world distances inclusively,
the surface target compares local distances strictly.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Sequence

from scipy.spatial.transform import Rotation

from ..coords import to_local_position
from ..store.manager import SurfaceInstanceManager
from ..surface import Prototype
from ..types import NO_FILTER, Vec3, as_vec3
from .model import PlacementTransform, PrototypeSettings

logger = logging.getLogger(__name__)


class PlacementTarget:
    def any_near(self, position: Sequence[float], radius: float) -> bool:
        raise NotImplementedError

    def place(self, settings: PrototypeSettings, transform: PlacementTransform, spacing: float) -> bool:
        """Store one object; ``spacing`` is the brush or disc diameter in use."""

        raise NotImplementedError


@dataclass
class SpawnedObject:
    prototype: Prototype
    position: Vec3
    rotation: Rotation
    scale: Vec3


@dataclass
class ObjectContainer(PlacementTarget):
    """Flat hierarchy of spawned objects in world space."""

    name: str = "container"
    children: List[SpawnedObject] = field(default_factory=list)

    def any_near(self, position: Sequence[float], radius: float) -> bool:
        point = as_vec3(position)
        for child in self.children:
            if math.dist(point, child.position) <= radius:
                return True
        return False

    def place(self, settings: PrototypeSettings, transform: PlacementTransform, spacing: float) -> bool:
        self.children.append(
            SpawnedObject(settings.prototype, transform.position, transform.rotation, transform.scale)
        )
        return True


class SurfaceTarget(PlacementTarget):
    """Places instances into the store of the manager's surface."""

    def __init__(
        self,
        manager: SurfaceInstanceManager,
        random_color: bool = False,
        color_adjustment: float = 0.0,
    ) -> None:
        self.manager = manager
        self.random_color = random_color
        self.color_adjustment = color_adjustment

    def any_near(self, position: Sequence[float], radius: float) -> bool:
        surface = self.manager.surface
        if surface is None:
            return False
        origin, size = surface.footprint()
        local = to_local_position(origin, size, position)
        return self.manager.is_overlapping(surface, local, NO_FILTER, radius)

    def place(self, settings: PrototypeSettings, transform: PlacementTransform, spacing: float) -> bool:
        return self.manager.place_instance(
            settings.prototype,
            transform.position,
            transform.scale,
            transform.rotation,
            spacing,
            random_color=self.random_color,
            color_adjustment=self.color_adjustment,
        )


__all__ = ["PlacementTarget", "SpawnedObject", "ObjectContainer", "SurfaceTarget"]
