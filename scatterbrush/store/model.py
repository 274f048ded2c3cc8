"""Instance records and the copy-then-swap store that owns them."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional, Tuple

import numpy as np

from ..types import WHITE, Color, Vec3


@dataclass(frozen=True)
class PlacedInstance:
    """One placed object on a surface.

    ``position`` is in the surface's normalized local space; only ``x`` and
    ``z`` are meaningful and ``y`` stays zero.
    """

    position: Vec3
    prototype_index: int
    color: Color = WHITE
    height_scale: float = 1.0
    width_scale: float = 1.0
    rotation: float = 0.0


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of a store's contents at one point in time."""

    instances: Tuple[PlacedInstance, ...] = ()
    version: int = 0
    _positions: Optional[np.ndarray] = field(default=None, init=False, repr=False, compare=False)
    _prototypes: Optional[np.ndarray] = field(default=None, init=False, repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.instances)

    def __iter__(self) -> Iterator[PlacedInstance]:
        return iter(self.instances)

    def __getitem__(self, index: int) -> PlacedInstance:
        return self.instances[index]

    @property
    def instance_count(self) -> int:
        return len(self.instances)

    @property
    def positions(self) -> np.ndarray:
        """``(N, 2)`` array of local ``(x, z)``, built on first use."""

        if self._positions is None:
            arr = np.empty((len(self.instances), 2), dtype=float)
            for row, inst in enumerate(self.instances):
                arr[row, 0] = inst.position[0]
                arr[row, 1] = inst.position[2]
            arr.setflags(write=False)
            object.__setattr__(self, "_positions", arr)
        return self._positions  # type: ignore[return-value]

    @property
    def prototype_indices(self) -> np.ndarray:
        if self._prototypes is None:
            arr = np.fromiter(
                (inst.prototype_index for inst in self.instances),
                dtype=np.int64,
                count=len(self.instances),
            )
            arr.setflags(write=False)
            object.__setattr__(self, "_prototypes", arr)
        return self._prototypes  # type: ignore[return-value]


class InstanceStore:
    """Ordered instance sequence owned by a surface.

    Writers never modify the published tuple. They build a replacement and
    swap it in under ``lock``, so a reader holding a :class:`StoreSnapshot`
    keeps a consistent view for as long as it needs it.
    """

    def __init__(self, instances: Iterable[PlacedInstance] = ()) -> None:
        self.lock = threading.RLock()
        self._snapshot = StoreSnapshot(tuple(instances), 0)

    def snapshot(self) -> StoreSnapshot:
        return self._snapshot

    @property
    def instances(self) -> Tuple[PlacedInstance, ...]:
        return self._snapshot.instances

    @property
    def instance_count(self) -> int:
        return len(self._snapshot.instances)

    @property
    def version(self) -> int:
        return self._snapshot.version

    def __len__(self) -> int:
        return len(self._snapshot.instances)

    def __iter__(self) -> Iterator[PlacedInstance]:
        return iter(self._snapshot.instances)

    def __getitem__(self, index: int) -> PlacedInstance:
        return self._snapshot.instances[index]

    def commit(self, instances: Iterable[PlacedInstance]) -> StoreSnapshot:
        """Publish ``instances`` as the new contents. Callers hold ``lock``."""

        snapshot = StoreSnapshot(tuple(instances), self._snapshot.version + 1)
        self._snapshot = snapshot
        return snapshot


class QueryStrategy(str, Enum):
    """How overlap queries evaluate the per-instance predicate."""

    PARALLEL = "parallel"
    SEQUENTIAL = "sequential"


@dataclass
class QueryOptions:
    """Tuning knobs for overlap queries."""

    strategy: QueryStrategy = QueryStrategy.PARALLEL
    max_workers: Optional[int] = None
    chunk_size: int = 4096


__all__ = ["PlacedInstance", "StoreSnapshot", "InstanceStore", "QueryStrategy", "QueryOptions"]
