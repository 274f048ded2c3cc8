"""Stroke scripts: a JSON description of a surface and brush strokes to replay.

Example::

    {
      "surface": {"origin": [0, 0, 0], "size": [100, 10, 100]},
      "prototypes": [{"name": "oak", "bounds": [2, 6, 2]}],
      "seed": 7,
      "strokes": [
        {"action": "place", "prototype": "oak", "position": [50, 0, 50],
         "distribution": "poisson_on_surface", "brush_size": 20,
         "poisson_disc_size": 4},
        {"action": "remove", "position": [50, 0, 50], "brush_size": 6}
      ]
    }

Actions: ``place``, ``remove``, ``grow``, ``shrink``, ``set_scale``,
``clear`` and ``undo``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from .brush.distribution import BrushDistribution
from .brush.model import AutoSimulation, BrushParameters, Distribution, PrototypeSettings, SpawnSettings
from .brush.targets import SurfaceTarget
from .errors import ScriptError
from .history import SnapshotHistory
from .store.manager import SurfaceInstanceManager
from .store.model import QueryOptions, QueryStrategy
from .surface import HeightFieldSurface, Prototype, PrototypeCatalog, SurfaceRayCaster
from .types import NO_FILTER, as_vec3

logger = logging.getLogger(__name__)

ACTIONS = ("place", "remove", "grow", "shrink", "set_scale", "clear", "undo")

_BRUSH_KEYS = {f.name for f in fields(BrushParameters)}
_SETTINGS_KEYS = {f.name for f in fields(PrototypeSettings)} - {"prototype"}

_VECTOR_KEYS = {"position", "normal", "position_offset", "rotation_min", "rotation_max", "rotation_offset"}
_FLOAT_KEYS = {
    "brush_size",
    "poisson_disc_size",
    "poisson_disc_raycast_offset",
    "brush_rotation",
    "scale_min",
    "scale_max",
    "factor",
    "width",
    "height",
}
_BOOL_KEYS = {"allow_overlap", "align_to_terrain", "change_scale", "random_rotation"}

_REQUIRED_KEYS = {
    "place": ("prototype", "position"),
    "remove": ("position", "brush_size"),
    "grow": ("position", "brush_size"),
    "shrink": ("position", "brush_size"),
    "set_scale": ("position", "brush_size", "width", "height"),
    "clear": (),
    "undo": (),
}


@dataclass
class StrokeScript:
    surface: HeightFieldSurface
    strokes: List[Dict[str, Any]]
    seed: Optional[int] = None
    strategy: QueryStrategy = QueryStrategy.PARALLEL
    spawn: SpawnSettings = field(default_factory=SpawnSettings)
    random_color: bool = False
    color_adjustment: float = 0.0


@dataclass
class StrokeOutcome:
    index: int
    action: str
    affected: int
    notes: List[str] = field(default_factory=list)


@dataclass
class ScriptReport:
    outcomes: List[StrokeOutcome]
    instance_count: int

    @property
    def placed(self) -> int:
        return sum(o.affected for o in self.outcomes if o.action == "place")


def _require(mapping: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in mapping:
        raise ScriptError(f"{where}: missing '{key}'")
    return mapping[key]


def _build_surface(data: Mapping[str, Any], prototypes: List[Prototype]) -> HeightFieldSurface:
    origin = as_vec3(data.get("origin", (0.0, 0.0, 0.0)))
    size = as_vec3(_require(data, "size", "surface"))
    heights = data.get("heights")
    grid = np.zeros((2, 2)) if heights is None else np.asarray(heights, dtype=float)
    return HeightFieldSurface(
        origin,
        size,
        grid,
        PrototypeCatalog(prototypes),
        name=str(data.get("name", "surface")),
    )


def _coerce_value(key: str, value: Any) -> Any:
    if key in _VECTOR_KEYS:
        return as_vec3(value)
    if key in _FLOAT_KEYS:
        if isinstance(value, bool):
            raise TypeError(f"'{key}' must be a number")
        return float(value)
    if key in _BOOL_KEYS:
        if not isinstance(value, bool):
            raise TypeError(f"'{key}' must be true or false")
        return value
    if key == "distribution":
        return Distribution(value)
    if key == "prototype":
        return str(value)
    return value


def _normalize_stroke(stroke: Any, where: str) -> Dict[str, Any]:
    """Check one stroke and return it with every known field coerced."""

    action = stroke.get("action") if isinstance(stroke, Mapping) else None
    if action not in ACTIONS:
        raise ScriptError(f"{where}: unknown action {action!r}")
    for key in _REQUIRED_KEYS[action]:
        _require(stroke, key, where)

    normalized: Dict[str, Any] = {}
    for key, value in stroke.items():
        try:
            normalized[key] = _coerce_value(key, value)
        except (TypeError, ValueError) as exc:
            raise ScriptError(f"{where}: invalid '{key}': {exc}") from exc
    return normalized


def parse_script(data: Mapping[str, Any]) -> StrokeScript:
    if not isinstance(data, Mapping):
        raise ScriptError("script must be a JSON object")

    prototypes = []
    for idx, entry in enumerate(data.get("prototypes", [])):
        where = f"prototypes[{idx}]"
        try:
            prototypes.append(
                Prototype(
                    name=str(_require(entry, "name", where)),
                    local_scale=as_vec3(entry.get("local_scale", (1.0, 1.0, 1.0))),
                    bounds=as_vec3(entry.get("bounds", (1.0, 1.0, 1.0))),
                )
            )
        except (TypeError, ValueError) as exc:
            raise ScriptError(f"{where}: {exc}") from exc

    try:
        surface = _build_surface(_require(data, "surface", "script"), prototypes)
    except ScriptError:
        raise
    except (TypeError, ValueError) as exc:
        raise ScriptError(f"surface: {exc}") from exc

    raw_strokes = data.get("strokes", [])
    if not isinstance(raw_strokes, list):
        raise ScriptError("strokes must be a list")
    strokes = [_normalize_stroke(stroke, f"strokes[{idx}]") for idx, stroke in enumerate(raw_strokes)]

    spawn_data = data.get("spawn", {})
    seed = data.get("seed")
    try:
        if not isinstance(spawn_data, Mapping):
            raise TypeError("spawn must be an object")
        spawn = SpawnSettings(
            auto_simulation=AutoSimulation(spawn_data.get("auto_simulation", "none")),
            height_offset=float(spawn_data.get("height_offset", 0.0)),
        )
        strategy = QueryStrategy(data.get("strategy", QueryStrategy.PARALLEL.value))
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise TypeError(f"seed must be an integer, got {seed!r}")
        color_adjustment = float(data.get("color_adjustment", 0.0))
    except (TypeError, ValueError) as exc:
        raise ScriptError(str(exc)) from exc

    return StrokeScript(
        surface=surface,
        strokes=strokes,
        seed=seed,
        strategy=strategy,
        spawn=spawn,
        random_color=bool(data.get("random_color", False)),
        color_adjustment=color_adjustment,
    )


def load_script(text: str) -> StrokeScript:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ScriptError(f"invalid JSON: {exc}") from exc
    return parse_script(data)


def _prototype(script: StrokeScript, stroke: Mapping[str, Any], where: str) -> Prototype:
    name = _require(stroke, "prototype", where)
    prototype = script.surface.prototypes.find(name)
    if prototype is None:
        # unregistered prototypes still reach the manager, which refuses them
        prototype = Prototype(name=str(name))
    return prototype


def _brush_parameters(stroke: Mapping[str, Any], where: str) -> BrushParameters:
    kwargs = {key: value for key, value in stroke.items() if key in _BRUSH_KEYS}
    _require(stroke, "position", where)
    try:
        return BrushParameters(**kwargs)
    except (TypeError, ValueError) as exc:
        raise ScriptError(f"{where}: {exc}") from exc


def run_script(script: StrokeScript, strategy: Optional[QueryStrategy] = None) -> ScriptReport:
    """Replay every stroke of ``script`` against its surface."""

    rng = np.random.default_rng(script.seed)
    surface = script.surface
    history = SnapshotHistory()
    manager = SurfaceInstanceManager(
        surface,
        undo=history,
        strategy=strategy or script.strategy,
        options=QueryOptions(),
        rng=rng,
    )
    engine = BrushDistribution(
        SurfaceTarget(manager, script.random_color, script.color_adjustment),
        ray_caster=SurfaceRayCaster([surface]),
        surface=surface,
        spawn=script.spawn,
        rng=rng,
    )

    outcomes: List[StrokeOutcome] = []
    for idx, stroke in enumerate(script.strokes):
        where = f"strokes[{idx}]"
        action = stroke["action"]
        outcome = StrokeOutcome(idx, action, 0)

        if action == "place":
            params = _brush_parameters(stroke, where)
            settings_kwargs = {k: v for k, v in stroke.items() if k in _SETTINGS_KEYS}
            settings = PrototypeSettings(_prototype(script, stroke, where), **settings_kwargs)
            result = engine.apply(params, settings)
            outcome.affected = result.placed_count
            outcome.notes.extend(result.diagnostics)
        elif action == "clear":
            outcome.affected = manager.remove_all()
        elif action == "undo":
            label = history.undo()
            outcome.notes.append(f"undo {label}" if label else "nothing to undo")
        else:
            position = as_vec3(_require(stroke, "position", where))
            brush_size = float(_require(stroke, "brush_size", where))
            if action == "remove":
                prototype_filter = NO_FILTER
                if "prototype" in stroke:
                    prototype_filter = surface.prototypes.index_of(_prototype(script, stroke, where))
                    if prototype_filter == NO_FILTER:
                        outcome.notes.append(f"Prototype not found: {stroke['prototype']}")
                        outcomes.append(outcome)
                        continue
                outcome.affected = manager.remove_overlapping(position, brush_size, prototype_filter)
            elif action in ("grow", "shrink"):
                factor = float(stroke.get("factor", 0.1))
                outcome.affected = manager.change_scale(position, brush_size, action == "grow", factor)
            else:
                outcome.affected = manager.set_scale(
                    position,
                    brush_size,
                    float(_require(stroke, "width", where)),
                    float(_require(stroke, "height", where)),
                )

        logger.info("Stroke %d (%s) affected %d instance(s)", idx, action, outcome.affected)
        outcomes.append(outcome)

    return ScriptReport(outcomes=outcomes, instance_count=len(surface.instances))


__all__ = [
    "ACTIONS",
    "StrokeScript",
    "StrokeOutcome",
    "ScriptReport",
    "parse_script",
    "load_script",
    "run_script",
]
