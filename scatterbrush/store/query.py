"""Radius queries against an instance store snapshot.

Two strategies answer the same questions. The sequential one walks the
records one by one; the parallel one splits the snapshot into chunks,
evaluates each chunk as a numpy mask on a worker thread and merges the
partial results. Both compare squared ``x``/``z`` distances against the
squared threshold using the same arithmetic, so ``all_within`` and
``all_outside`` agree exactly. ``any_within`` agrees on existence only.
"""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ..logging_utils import apply_debug_logging
from ..types import NO_FILTER, Vec2
from .config import get_query_options
from .model import PlacedInstance, QueryOptions, QueryStrategy, StoreSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscRegion:
    """Disc with a centre and radius in one coordinate space."""

    center: Vec2
    radius: float

    @classmethod
    def from_position(cls, position: Sequence[float], radius: float) -> "DiscRegion":
        """Build a region from an ``(x, z)`` pair or an ``(x, y, z)`` position."""

        if len(position) == 3:
            return cls((float(position[0]), float(position[2])), float(radius))
        return cls((float(position[0]), float(position[1])), float(radius))


def _matches(instance: PlacedInstance, region: DiscRegion, prototype_filter: int) -> bool:
    if prototype_filter != NO_FILTER and instance.prototype_index != prototype_filter:
        return False
    dx = instance.position[0] - region.center[0]
    dz = instance.position[2] - region.center[1]
    return dx * dx + dz * dz < region.radius * region.radius


def _chunk_mask(
    positions: np.ndarray,
    prototypes: np.ndarray,
    start: int,
    stop: int,
    region: DiscRegion,
    prototype_filter: int,
) -> np.ndarray:
    dx = positions[start:stop, 0] - region.center[0]
    dz = positions[start:stop, 1] - region.center[1]
    mask = dx * dx + dz * dz < region.radius * region.radius
    if prototype_filter != NO_FILTER:
        mask &= prototypes[start:stop] == prototype_filter
    return mask


class OverlapQuery:
    """Interface shared by the query strategies."""

    strategy: QueryStrategy

    def any_within(
        self, snapshot: StoreSnapshot, region: DiscRegion, prototype_filter: int = NO_FILTER
    ) -> bool:
        raise NotImplementedError

    def all_within(
        self, snapshot: StoreSnapshot, region: DiscRegion, prototype_filter: int = NO_FILTER
    ) -> List[int]:
        raise NotImplementedError

    def all_outside(
        self, snapshot: StoreSnapshot, region: DiscRegion, prototype_filter: int = NO_FILTER
    ) -> List[int]:
        """Indices of every instance that ``all_within`` would not return."""

        inside = set(self.all_within(snapshot, region, prototype_filter))
        return [idx for idx in range(len(snapshot)) if idx not in inside]


class SequentialOverlapQuery(OverlapQuery):
    strategy = QueryStrategy.SEQUENTIAL

    def any_within(
        self, snapshot: StoreSnapshot, region: DiscRegion, prototype_filter: int = NO_FILTER
    ) -> bool:
        for instance in snapshot.instances:
            if _matches(instance, region, prototype_filter):
                return True
        return False

    def all_within(
        self, snapshot: StoreSnapshot, region: DiscRegion, prototype_filter: int = NO_FILTER
    ) -> List[int]:
        return [
            idx
            for idx, instance in enumerate(snapshot.instances)
            if _matches(instance, region, prototype_filter)
        ]


class ParallelOverlapQuery(OverlapQuery):
    strategy = QueryStrategy.PARALLEL

    def __init__(self, max_workers: Optional[int] = None, chunk_size: int = 4096) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.max_workers = max_workers
        self.chunk_size = chunk_size

    def _bounds(self, count: int) -> List[range]:
        return [range(start, min(start + self.chunk_size, count)) for start in range(0, count, self.chunk_size)]

    def any_within(
        self, snapshot: StoreSnapshot, region: DiscRegion, prototype_filter: int = NO_FILTER
    ) -> bool:
        count = len(snapshot)
        if count == 0:
            return False
        positions = snapshot.positions
        prototypes = snapshot.prototype_indices

        def scan(bounds: range) -> bool:
            mask = _chunk_mask(positions, prototypes, bounds.start, bounds.stop, region, prototype_filter)
            return bool(mask.any())

        chunks = self._bounds(count)
        if len(chunks) == 1:
            return scan(chunks[0])

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            pending = {pool.submit(scan, bounds) for bounds in chunks}
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                if any(future.result() for future in done):
                    for future in pending:
                        future.cancel()
                    return True
        return False

    def all_within(
        self, snapshot: StoreSnapshot, region: DiscRegion, prototype_filter: int = NO_FILTER
    ) -> List[int]:
        return self._collect(snapshot, region, prototype_filter, inside=True)

    def all_outside(
        self, snapshot: StoreSnapshot, region: DiscRegion, prototype_filter: int = NO_FILTER
    ) -> List[int]:
        return self._collect(snapshot, region, prototype_filter, inside=False)

    def _collect(
        self, snapshot: StoreSnapshot, region: DiscRegion, prototype_filter: int, *, inside: bool
    ) -> List[int]:
        count = len(snapshot)
        if count == 0:
            return []
        positions = snapshot.positions
        prototypes = snapshot.prototype_indices

        def select(bounds: range) -> np.ndarray:
            mask = _chunk_mask(positions, prototypes, bounds.start, bounds.stop, region, prototype_filter)
            if not inside:
                mask = ~mask
            return np.flatnonzero(mask) + bounds.start

        chunks = self._bounds(count)
        if len(chunks) == 1:
            parts = [select(chunks[0])]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                # map() yields in submission order, which keeps the merge deterministic
                parts = list(pool.map(select, chunks))
        return [int(idx) for part in parts for idx in part]


def create_overlap_query(
    strategy: Optional[QueryStrategy] = None, options: Optional[QueryOptions] = None
) -> OverlapQuery:
    """Build the query implementation for ``strategy``.

    Unset arguments fall back to :func:`get_query_options`.
    """

    opts = options if options is not None else get_query_options()
    chosen = QueryStrategy(strategy) if strategy is not None else opts.strategy
    if chosen is QueryStrategy.SEQUENTIAL:
        return SequentialOverlapQuery()
    return ParallelOverlapQuery(max_workers=opts.max_workers, chunk_size=opts.chunk_size)


__all__ = [
    "DiscRegion",
    "OverlapQuery",
    "SequentialOverlapQuery",
    "ParallelOverlapQuery",
    "create_overlap_query",
]


apply_debug_logging(globals(), logger=logger, skip={"DiscRegion", "from_position"})
