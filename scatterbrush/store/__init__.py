"""Instance storage, radius queries and batch edits for surfaces."""

from .config import get_query_options, set_query_options
from .manager import SurfaceInstanceManager, yaw_radians
from .model import InstanceStore, PlacedInstance, QueryOptions, QueryStrategy, StoreSnapshot
from .mutator import RescaleFn, StoreMutator, grow_scale, set_scale
from .query import (
    DiscRegion,
    OverlapQuery,
    ParallelOverlapQuery,
    SequentialOverlapQuery,
    create_overlap_query,
)

__all__ = [
    "DiscRegion",
    "InstanceStore",
    "OverlapQuery",
    "ParallelOverlapQuery",
    "PlacedInstance",
    "QueryOptions",
    "QueryStrategy",
    "RescaleFn",
    "SequentialOverlapQuery",
    "StoreMutator",
    "StoreSnapshot",
    "SurfaceInstanceManager",
    "create_overlap_query",
    "get_query_options",
    "grow_scale",
    "set_query_options",
    "set_scale",
    "yaw_radians",
]
