"""Undo sinks called before every store mutation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

if TYPE_CHECKING:
    from .store.model import InstanceStore, PlacedInstance

logger = logging.getLogger(__name__)

# Steps kept by default; each step holds a full copy of the store contents.
DEFAULT_HISTORY_LIMIT = 64


class UndoRecorder:
    """Receives ``snapshot_before_mutation`` before a target changes.

    Recorders run synchronously; an exception raised here aborts the
    mutation before any data is replaced.
    """

    def snapshot_before_mutation(self, target: Any, label: str) -> None:
        raise NotImplementedError


class NullUndo(UndoRecorder):
    def snapshot_before_mutation(self, target: Any, label: str) -> None:
        return None


@dataclass
class HistoryEntry:
    label: str
    store: "InstanceStore"
    instances: Tuple["PlacedInstance", ...]


class SnapshotHistory(UndoRecorder):
    """In-memory undo stack of complete store contents.

    At most ``limit`` steps are kept, oldest dropped first; ``None`` keeps
    every step.
    """

    def __init__(self, limit: Optional[int] = DEFAULT_HISTORY_LIMIT) -> None:
        self.limit = limit
        self.entries: List[HistoryEntry] = []

    def __len__(self) -> int:
        return len(self.entries)

    def snapshot_before_mutation(self, target: Any, label: str) -> None:
        self.entries.append(HistoryEntry(label, target, tuple(target.instances)))
        if self.limit is not None and len(self.entries) > self.limit:
            del self.entries[0]
        logger.debug("Recorded undo step '%s' (%d instance(s))", label, len(target.instances))

    def undo(self) -> Optional[str]:
        """Restore the most recent snapshot and return its label."""

        if not self.entries:
            return None
        entry = self.entries.pop()
        with entry.store.lock:
            entry.store.commit(entry.instances)
        logger.info("Undo '%s'", entry.label)
        return entry.label


__all__ = ["DEFAULT_HISTORY_LIMIT", "UndoRecorder", "NullUndo", "HistoryEntry", "SnapshotHistory"]
