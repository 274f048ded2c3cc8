"""Turns a brush application into placements."""

from __future__ import annotations

import logging
import math
from typing import Iterator, Optional, Tuple

import numpy as np

from ..sampling import DEFAULT_ATTEMPTS, PoissonDiscSampler
from ..surface import RayCaster, Surface
from ..types import DOWN, UP, Vec3
from .model import (
    BrushParameters,
    BrushResult,
    Distribution,
    Placement,
    PrototypeSettings,
    SpawnSettings,
)
from .targets import PlacementTarget
from .transform import apply_height_offset, create_applied_transform

logger = logging.getLogger(__name__)


class BrushDistribution:
    """Placement engine for the brush distribution modes.

    ``ray_caster`` is needed by the free-space scatter mode, ``surface`` by
    the on-surface scatter mode. Without them those modes place nothing and
    report why in the result diagnostics.
    """

    def __init__(
        self,
        target: PlacementTarget,
        ray_caster: Optional[RayCaster] = None,
        surface: Optional[Surface] = None,
        spawn: Optional[SpawnSettings] = None,
        rng: Optional[np.random.Generator] = None,
        sampler_attempts: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self.target = target
        self.ray_caster = ray_caster
        self.surface = surface
        self.spawn = spawn if spawn is not None else SpawnSettings()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.sampler_attempts = sampler_attempts

    def apply(self, params: BrushParameters, settings: PrototypeSettings) -> BrushResult:
        """Dispatch on ``params.distribution``."""

        if params.distribution in (Distribution.CENTER, Distribution.SCALE_TO_BRUSH_SIZE):
            result = self.add_center(params, settings)
        elif params.distribution is Distribution.POISSON_FREE_SPACE:
            result = self.add_poisson_any(params, settings)
        else:
            result = self.add_poisson_on_surface(params, settings)
        logger.info(
            "Brush %s at (%.3f, %.3f, %.3f): %d candidate(s), %d placed",
            params.distribution.value,
            *params.position,
            result.candidates,
            result.placed_count,
        )
        return result

    def add_center(self, params: BrushParameters, settings: PrototypeSettings) -> BrushResult:
        """Place one object at the brush centre, once per brush radius."""

        result = BrushResult(candidates=1)
        if not params.allow_overlap and self.target.any_near(params.position, params.brush_radius):
            result.rejected_overlap += 1
            return result
        self._emit(result, params, settings, params.position, params.brush_size)
        return result

    def add_poisson_any(self, params: BrushParameters, settings: PrototypeSettings) -> BrushResult:
        """Scatter over whatever the vertical rays hit."""

        result = BrushResult()
        if self.ray_caster is None:
            result.diagnostics.append("No ray caster configured")
            logger.error("No ray caster configured")
            return result

        cast_y = params.position[1] + params.poisson_disc_raycast_offset
        for x, z in self._disc_samples(params):
            result.candidates += 1
            origin = (x, cast_y, z)
            hit = self.ray_caster.cast_vertical(origin, DOWN)
            if hit is None:
                hit = self.ray_caster.cast_vertical(origin, UP)
            if hit is None:
                result.skipped_no_hit += 1
                continue
            self._scatter_one(result, params, settings, (x, hit[1], z))
        return result

    def add_poisson_on_surface(self, params: BrushParameters, settings: PrototypeSettings) -> BrushResult:
        """Scatter with heights taken straight from the active surface."""

        result = BrushResult()
        surface = self.surface
        if surface is None:
            result.diagnostics.append("Surface not found")
            logger.error("Surface not found")
            return result

        y_offset = surface.world_y_offset()
        for x, z in self._disc_samples(params):
            result.candidates += 1
            y = surface.height_at(x, z) + y_offset
            self._scatter_one(result, params, settings, (x, y, z))
        return result

    def _disc_samples(self, params: BrushParameters) -> Iterator[Tuple[float, float]]:
        """World ``(x, z)`` of Poisson samples inside the brush disc."""

        size = params.brush_size
        radius = params.brush_radius
        sampler = PoissonDiscSampler(size, size, params.disc_radius, rng=self.rng, attempts=self.sampler_attempts)
        px, _, pz = params.position
        for sx, sz in sampler.samples():
            # sampled over the bounding square; keep the disc
            if math.hypot(sx - radius, sz - radius) > radius:
                continue
            yield (px + sx - radius, pz + sz - radius)

    def _scatter_one(
        self,
        result: BrushResult,
        params: BrushParameters,
        settings: PrototypeSettings,
        position: Vec3,
    ) -> None:
        lifted = apply_height_offset(position, self.spawn)
        if not params.allow_overlap and self.target.any_near(lifted, params.disc_radius):
            result.rejected_overlap += 1
            return
        # the transform applies the lift itself
        self._emit(result, params, settings, position, params.poisson_disc_size)

    def _emit(
        self,
        result: BrushResult,
        params: BrushParameters,
        settings: PrototypeSettings,
        position: Vec3,
        spacing: float,
    ) -> None:
        transform = create_applied_transform(settings, position, params.normal, params, self.spawn, self.rng)
        if self.target.place(settings, transform, spacing):
            result.placed.append(Placement(settings.prototype, transform))
        else:
            result.rejected_target += 1


__all__ = ["BrushDistribution"]
