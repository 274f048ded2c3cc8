"""Surface-specific placement, removal and rescaling of stored instances."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, List, Optional, Sequence

import numpy as np
from scipy.spatial.transform import Rotation

from ..coords import is_inside_unit_square, local_radius, to_local_position
from ..errors import PrototypeNotFoundError, ScatterError, SurfaceNotFoundError
from ..history import UndoRecorder
from ..logging_utils import apply_debug_logging
from ..types import NO_FILTER, WHITE, Color
from .model import PlacedInstance, QueryOptions, QueryStrategy, StoreSnapshot
from .mutator import StoreMutator, grow_scale, set_scale
from .query import DiscRegion, create_overlap_query

if TYPE_CHECKING:
    from ..surface import Prototype, Surface

logger = logging.getLogger(__name__)


def yaw_radians(rotation: Rotation) -> float:
    """Yaw of ``rotation`` about +Y in ``[0, 2*pi)``.

    Uses the Z-X-Y Euler decomposition so the value matches the Y angle a
    ``from_euler("zxy", [z, x, y])`` rotation was built from.
    """

    _, _, yaw = rotation.as_euler("zxy", degrees=False)
    return float(yaw) % (2.0 * math.pi)


class SurfaceInstanceManager:
    """Edits the instance store of the configured surface.

    Every public operation degrades to a logged no-op when no surface is
    configured. Removal and rescale brushes take a world position and a brush
    size (diameter); the radius is converted to local units using the X
    extent of the surface.
    """

    def __init__(
        self,
        surface: Optional["Surface"] = None,
        undo: Optional[UndoRecorder] = None,
        strategy: Optional[QueryStrategy] = None,
        options: Optional[QueryOptions] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.surface = surface
        self.mutator = StoreMutator(undo)
        self.query = create_overlap_query(strategy, options)
        self.rng = rng if rng is not None else np.random.default_rng()

    def _require_surface(self) -> "Surface":
        if self.surface is None:
            raise SurfaceNotFoundError()
        return self.surface

    @staticmethod
    def get_prototype_index(surface: "Surface", prototype: "Prototype") -> int:
        """Index of ``prototype`` in the surface catalog, ``-1`` if absent."""

        return surface.prototypes.index_of(prototype)

    def tree_color(self, adjustment: float) -> Color:
        """White darkened by a random factor in ``[1 - adjustment, 1]``."""

        factor = float(self.rng.uniform(1.0 - adjustment, 1.0))
        return (factor, factor, factor, 1.0)

    def is_overlapping(
        self,
        surface: "Surface",
        local_position: Sequence[float],
        prototype_filter: int,
        min_distance_world: float,
        snapshot: Optional[StoreSnapshot] = None,
    ) -> bool:
        _, size = surface.footprint()
        region = DiscRegion.from_position(local_position, local_radius(size, min_distance_world))
        current = snapshot if snapshot is not None else surface.instances.snapshot()
        return self.query.any_within(current, region, prototype_filter)

    def place_instance(
        self,
        prototype: "Prototype",
        world_position: Sequence[float],
        world_scale: Sequence[float],
        rotation: Rotation,
        brush_size: float,
        random_color: bool = False,
        color_adjustment: float = 0.0,
    ) -> bool:
        """Add one instance unless another lies within ``brush_size / 2``.

        Returns ``True`` when the instance was stored.
        """

        try:
            surface = self._require_surface()
            prototype_index = self.get_prototype_index(surface, prototype)
            if prototype_index == NO_FILTER:
                raise PrototypeNotFoundError(prototype)
        except ScatterError as exc:
            logger.error("%s", exc)
            return False

        origin, size = surface.footprint()
        local = to_local_position(origin, size, world_position)
        if not is_inside_unit_square(local):
            logger.debug("Rejected placement outside surface at local %s", local)
            return False

        color = self.tree_color(color_adjustment) if random_color else WHITE
        instance = PlacedInstance(
            position=local,
            prototype_index=prototype_index,
            color=color,
            height_scale=float(world_scale[1]),
            width_scale=float(world_scale[0]),
            rotation=yaw_radians(rotation),
        )

        store = surface.instances
        with store.lock:
            # the brush radius doubles as the spacing for poisson discs
            if self.is_overlapping(surface, local, NO_FILTER, brush_size * 0.5, store.snapshot()):
                return False
            self.mutator.place_one(store, instance, label="Add tree")
        return True

    def remove_all(self) -> int:
        try:
            surface = self._require_surface()
        except ScatterError as exc:
            logger.error("%s", exc)
            return 0
        store = surface.instances
        with store.lock:
            removed = len(store)
            self.mutator.remove_all(store, label="Remove all trees")
        return removed

    def remove_overlapping(
        self, world_position: Sequence[float], brush_size: float, prototype_filter: int = NO_FILTER
    ) -> int:
        """Remove instances within the brush; returns how many were removed."""

        try:
            surface = self._require_surface()
        except ScatterError as exc:
            logger.error("%s", exc)
            return 0

        region = self._brush_region(surface, world_position, brush_size)
        store = surface.instances
        with store.lock:
            snapshot = store.snapshot()
            keep = self.query.all_outside(snapshot, region, prototype_filter)
            self.mutator.retain(store, keep, label="Remove trees")
        return len(snapshot) - len(keep)

    def change_scale(self, world_position: Sequence[float], brush_size: float, grow: bool, factor: float) -> int:
        return self._rescale(world_position, brush_size, grow_scale(factor, grow))

    def set_scale(self, world_position: Sequence[float], brush_size: float, scale_x: float, scale_y: float) -> int:
        return self._rescale(world_position, brush_size, set_scale(scale_x, scale_y))

    def _rescale(self, world_position, brush_size, fn) -> int:
        try:
            surface = self._require_surface()
        except ScatterError as exc:
            logger.error("%s", exc)
            return 0

        region = self._brush_region(surface, world_position, brush_size)
        store = surface.instances
        with store.lock:
            indices = self.query.all_within(store.snapshot(), region)
            if not indices:
                return 0
            self.mutator.rescale_batch(store, indices, fn, label="Scale tree")
        return len(indices)

    @staticmethod
    def _brush_region(surface: "Surface", world_position: Sequence[float], brush_size: float) -> DiscRegion:
        origin, size = surface.footprint()
        local = to_local_position(origin, size, world_position)
        return DiscRegion.from_position(local, local_radius(size, brush_size * 0.5))

    def log_prototypes(self) -> None:
        try:
            surface = self._require_surface()
        except ScatterError as exc:
            logger.error("%s", exc)
            return
        for prototype in surface.prototypes:
            logger.info("prototype: %s", prototype.name)
        logger.info("Surface: %s, prototypes: %d", surface.name, len(surface.prototypes))

    def extract_prototypes(self) -> List["Prototype"]:
        if self.surface is None:
            logger.error("Surface not found")
            return []
        return list(self.surface.prototypes)


__all__ = ["SurfaceInstanceManager", "yaw_radians"]


apply_debug_logging(globals(), logger=logger, skip={"tree_color", "yaw_radians"})
