import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from scatterbrush import (
    QueryStrategy,
    ScriptError,
    export_instances,
    load_script,
    run_script,
    write_export,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Replay brush strokes onto a surface")
    parser.add_argument("path", help="Path to the JSON stroke script")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed overriding the script's seed",
    )
    parser.add_argument(
        "--strategy",
        choices=[strategy.value for strategy in QueryStrategy],
        help="Overlap query strategy (default: the script's, else parallel)",
    )
    parser.add_argument(
        "--export-path",
        help="Write the resulting instances as JSON to the given path",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print every resulting instance",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    text = Path(args.path).read_text(encoding="utf-8")

    logger.info("Loading stroke script from %s", args.path)
    try:
        script = load_script(text)
    except ScriptError as exc:
        logger.error("Invalid stroke script: %s", exc)
        raise SystemExit(1) from exc

    if args.seed is not None:
        script.seed = args.seed
    strategy = QueryStrategy(args.strategy) if args.strategy else None

    try:
        report = run_script(script, strategy=strategy)
    except ScriptError as exc:
        logger.error("Stroke script failed: %s", exc)
        raise SystemExit(1) from exc

    surface = script.surface
    origin, size = surface.footprint()
    print(f"Surface: {surface.name} origin={origin} size={size}")
    print(f"Prototypes: {', '.join(p.name for p in surface.prototypes) or '(none)'}")
    print("Strokes:")
    for outcome in report.outcomes:
        print(f"  [{outcome.index}] {outcome.action}: {outcome.affected}")
        for note in outcome.notes:
            print(f"    note: {note}")
    print(f"Placed: {report.placed}")
    print(f"Instances: {report.instance_count}")

    if args.list:
        for record in export_instances(surface)["instances"]:
            x, y, z = record["world"]
            print(
                f"  {record['prototype']}: ({x:.3f}, {y:.3f}, {z:.3f}) "
                f"h={record['height_scale']:.3f} w={record['width_scale']:.3f}"
            )

    if args.export_path:
        output_path = write_export(surface, args.export_path)
        print(f"Export written to {output_path}")


if __name__ == "__main__":
    main(sys.argv[1:])
