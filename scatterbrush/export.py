"""JSON export of a surface's placed instances."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from .coords import to_world
from .surface import Surface

logger = logging.getLogger(__name__)


def export_instances(surface: Surface) -> Dict[str, Any]:
    """Describe every stored instance with both local and world positions."""

    origin, size = surface.footprint()
    names = [prototype.name for prototype in surface.prototypes]
    records: List[Dict[str, Any]] = []
    for inst in surface.instances.snapshot():
        world = to_world(origin, size, inst.position)
        x, z = world[0], world[2]
        records.append(
            {
                "prototype": names[inst.prototype_index],
                "prototype_index": inst.prototype_index,
                "local": [inst.position[0], inst.position[2]],
                "world": [x, surface.height_at(x, z) + surface.world_y_offset(), z],
                "color": list(inst.color),
                "height_scale": inst.height_scale,
                "width_scale": inst.width_scale,
                "rotation": inst.rotation,
            }
        )
    return {
        "surface": surface.name,
        "origin": list(origin),
        "size": list(size),
        "prototypes": names,
        "instances": records,
    }


def write_export(surface: Surface, path: Union[str, Path]) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = export_instances(surface)
    output_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info("Wrote %d instance(s) to %s", len(payload["instances"]), output_path)
    return output_path


__all__ = ["export_instances", "write_export"]
