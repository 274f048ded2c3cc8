"""Blue-noise (Poisson-disc) point generation over a rectangle."""

from __future__ import annotations

import logging
import math
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .types import Vec2

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 30


class PoissonDiscSampler:
    """Dart throwing with a background grid.

    Points are kept at least ``radius`` apart and fill ``[0, width) x
    [0, height)`` as densely as that allows. The background grid uses cells of
    ``radius / sqrt(2)`` so each cell holds at most one sample and a neighbour
    check only visits the surrounding 5x5 block.

    The generator passed as ``rng`` drives every random decision, so a sampler
    built from a freshly seeded generator reproduces the same sequence.
    """

    def __init__(
        self,
        width: float,
        height: float,
        radius: float,
        rng: Optional[np.random.Generator] = None,
        attempts: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self.width = float(width)
        self.height = float(height)
        self.radius = float(radius)
        self.attempts = int(attempts)
        self.rng = rng if rng is not None else np.random.default_rng()

        self._radius_sq = self.radius * self.radius
        self._cell_size = self.radius / math.sqrt(2.0)
        self._cols = max(1, int(math.ceil(self.width / self._cell_size)))
        self._rows = max(1, int(math.ceil(self.height / self._cell_size)))

    def _cell(self, point: Vec2) -> Tuple[int, int]:
        col = min(int(point[0] / self._cell_size), self._cols - 1)
        row = min(int(point[1] / self._cell_size), self._rows - 1)
        return col, row

    def _is_far_enough(self, grid: List[List[Optional[Vec2]]], point: Vec2) -> bool:
        col, row = self._cell(point)
        for c in range(max(col - 2, 0), min(col + 3, self._cols)):
            column = grid[c]
            for r in range(max(row - 2, 0), min(row + 3, self._rows)):
                other = column[r]
                if other is None:
                    continue
                dx = other[0] - point[0]
                dy = other[1] - point[1]
                if dx * dx + dy * dy < self._radius_sq:
                    return False
        return True

    def samples(self) -> Iterator[Vec2]:
        """Yield points in generation order until the rectangle is saturated."""

        grid: List[List[Optional[Vec2]]] = [[None] * self._rows for _ in range(self._cols)]
        active: List[Vec2] = []

        def accept(point: Vec2) -> Vec2:
            col, row = self._cell(point)
            grid[col][row] = point
            active.append(point)
            return point

        rng = self.rng
        first = (float(rng.uniform(0.0, self.width)), float(rng.uniform(0.0, self.height)))
        yield accept(first)

        produced = 1
        while active:
            idx = int(rng.integers(len(active)))
            cx, cy = active[idx]
            found = False
            for _ in range(self.attempts):
                angle = 2.0 * math.pi * float(rng.random())
                # area-uniform distance in [r, 2r)
                dist = math.sqrt(self._radius_sq * (3.0 * float(rng.random()) + 1.0))
                candidate = (cx + dist * math.cos(angle), cy + dist * math.sin(angle))
                if not (0.0 <= candidate[0] < self.width and 0.0 <= candidate[1] < self.height):
                    continue
                if not self._is_far_enough(grid, candidate):
                    continue
                found = True
                produced += 1
                yield accept(candidate)
                break
            if not found:
                active[idx] = active[-1]
                active.pop()

        logger.debug(
            "Poisson sampler produced %d point(s) over %.3gx%.3g with radius %.3g",
            produced,
            self.width,
            self.height,
            self.radius,
        )


def poisson_disc_samples(
    width: float,
    height: float,
    radius: float,
    rng: Optional[np.random.Generator] = None,
    attempts: int = DEFAULT_ATTEMPTS,
) -> np.ndarray:
    """Return every sample of a :class:`PoissonDiscSampler` as an ``(N, 2)`` array."""

    sampler = PoissonDiscSampler(width, height, radius, rng=rng, attempts=attempts)
    points = list(sampler.samples())
    if not points:
        return np.zeros((0, 2), dtype=float)
    return np.asarray(points, dtype=float)


__all__ = ["DEFAULT_ATTEMPTS", "PoissonDiscSampler", "poisson_disc_samples"]
