from .coords import is_inside_unit_square, local_radius, to_local, to_local_position, to_world
from .errors import PrototypeNotFoundError, ScatterError, ScriptError, SurfaceNotFoundError
from .history import NullUndo, SnapshotHistory, UndoRecorder
from .sampling import PoissonDiscSampler, poisson_disc_samples
from .store import (
    DiscRegion,
    InstanceStore,
    OverlapQuery,
    ParallelOverlapQuery,
    PlacedInstance,
    QueryOptions,
    QueryStrategy,
    SequentialOverlapQuery,
    StoreMutator,
    StoreSnapshot,
    SurfaceInstanceManager,
    create_overlap_query,
    get_query_options,
    grow_scale,
    set_query_options,
    set_scale,
)
from .surface import HeightFieldSurface, Prototype, PrototypeCatalog, RayCaster, Surface, SurfaceRayCaster
from .brush import (
    AutoSimulation,
    BrushDistribution,
    BrushParameters,
    BrushResult,
    Distribution,
    ObjectContainer,
    PlacementTarget,
    PrototypeSettings,
    SpawnSettings,
    SurfaceTarget,
)
from .export import export_instances, write_export
from .script import ScriptReport, StrokeScript, load_script, parse_script, run_script
from .types import NO_FILTER

__all__ = [
    'to_local',
    'to_local_position',
    'to_world',
    'local_radius',
    'is_inside_unit_square',
    'ScatterError',
    'SurfaceNotFoundError',
    'PrototypeNotFoundError',
    'ScriptError',
    'UndoRecorder',
    'NullUndo',
    'SnapshotHistory',
    'PoissonDiscSampler',
    'poisson_disc_samples',
    'DiscRegion',
    'InstanceStore',
    'OverlapQuery',
    'ParallelOverlapQuery',
    'SequentialOverlapQuery',
    'PlacedInstance',
    'QueryOptions',
    'QueryStrategy',
    'StoreMutator',
    'StoreSnapshot',
    'SurfaceInstanceManager',
    'create_overlap_query',
    'get_query_options',
    'set_query_options',
    'grow_scale',
    'set_scale',
    'Surface',
    'HeightFieldSurface',
    'Prototype',
    'PrototypeCatalog',
    'RayCaster',
    'SurfaceRayCaster',
    'AutoSimulation',
    'BrushDistribution',
    'BrushParameters',
    'BrushResult',
    'Distribution',
    'ObjectContainer',
    'PlacementTarget',
    'PrototypeSettings',
    'SpawnSettings',
    'SurfaceTarget',
    'export_instances',
    'write_export',
    'StrokeScript',
    'ScriptReport',
    'load_script',
    'parse_script',
    'run_script',
    'NO_FILTER',
]
