"""Batch mutations of an :class:`InstanceStore`.

Every operation records an undo snapshot before anything becomes visible,
then builds the new contents and publishes them with a single swap.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable, Optional, Sequence

from ..history import NullUndo, UndoRecorder
from .model import InstanceStore, PlacedInstance, StoreSnapshot

logger = logging.getLogger(__name__)

RescaleFn = Callable[[PlacedInstance], PlacedInstance]


def grow_scale(factor: float, grow: bool) -> RescaleFn:
    """Relative rescale: ``scale +/- scale * factor`` on both scale fields."""

    sign = 1.0 if grow else -1.0

    def apply(instance: PlacedInstance) -> PlacedInstance:
        return replace(
            instance,
            height_scale=instance.height_scale + instance.height_scale * factor * sign,
            width_scale=instance.width_scale + instance.width_scale * factor * sign,
        )

    return apply


def set_scale(width: float, height: float) -> RescaleFn:
    """Absolute rescale, idempotent by construction."""

    def apply(instance: PlacedInstance) -> PlacedInstance:
        return replace(instance, width_scale=float(width), height_scale=float(height))

    return apply


class StoreMutator:
    def __init__(self, undo: Optional[UndoRecorder] = None) -> None:
        self.undo: UndoRecorder = undo if undo is not None else NullUndo()

    def _record(self, store: InstanceStore, label: str) -> None:
        self.undo.snapshot_before_mutation(store, label)

    def place_one(self, store: InstanceStore, instance: PlacedInstance, label: str = "Add instance") -> StoreSnapshot:
        """Append ``instance``. The caller has already run its overlap check."""

        with store.lock:
            self._record(store, label)
            return store.commit(store.instances + (instance,))

    def remove_all(self, store: InstanceStore, label: str = "Remove all instances") -> StoreSnapshot:
        with store.lock:
            self._record(store, label)
            snapshot = store.commit(())
        logger.info("Removed all instances")
        return snapshot

    def remove_matching(
        self, store: InstanceStore, indices: Iterable[int], label: str = "Remove instances"
    ) -> StoreSnapshot:
        """Drop the instances at ``indices``; the rest keep their relative order."""

        doomed = set(indices)
        with store.lock:
            self._record(store, label)
            kept = [inst for idx, inst in enumerate(store.instances) if idx not in doomed]
            snapshot = store.commit(kept)
        logger.info("Removed %d instance(s), %d remaining", len(doomed), len(snapshot))
        return snapshot

    def retain(self, store: InstanceStore, indices: Sequence[int], label: str = "Remove instances") -> StoreSnapshot:
        """Keep only the instances at ``indices``, in index order."""

        with store.lock:
            self._record(store, label)
            current = store.instances
            snapshot = store.commit(current[idx] for idx in sorted(set(indices)))
        logger.info("Retained %d of %d instance(s)", len(snapshot), len(current))
        return snapshot

    def rescale_batch(
        self,
        store: InstanceStore,
        indices: Sequence[int],
        fn: RescaleFn,
        label: str = "Scale instances",
    ) -> StoreSnapshot:
        """Apply ``fn`` once per listed instance, copying back scale fields only."""

        unique = sorted(set(indices))
        with store.lock:
            self._record(store, label)
            updated = list(store.instances)
            for idx in unique:
                old = updated[idx]
                new = fn(old)
                updated[idx] = replace(old, height_scale=new.height_scale, width_scale=new.width_scale)
            snapshot = store.commit(updated)
        logger.info("Rescaled %d instance(s)", len(unique))
        return snapshot


__all__ = ["RescaleFn", "grow_scale", "set_scale", "StoreMutator"]
