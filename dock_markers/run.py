import argparse
import logging
import math
import sys
from typing import Optional

from .config import DockConfig, default_config, load_config
from .errors import InvalidArgument
from .logging_utils import add_file_handler, setup_logger
from .output import OUTPUT_FORMATS, build_output
from .transformer import DockMarkerCalculator


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Compute world-frame corner positions of the dock fiducial markers",
        epilog="Example: python -m dock_markers.run --config configs/dock.yaml --format lua",
    )
    ap.add_argument("--config", help="Path to JSON/YAML config (built-in dock layout if omitted)")

    ap.add_argument("--unit", help="Drawing unit label (mm, in, m)")
    ap.add_argument("--roll", type=float, help="Dock roll angle about world X (radians)")
    ap.add_argument("--yaw", type=float, help="Dock yaw angle about world Z (radians)")
    ap.add_argument("--roll-deg", type=float, help="Dock roll angle about world X (degrees)")
    ap.add_argument("--yaw-deg", type=float, help="Dock yaw angle about world Z (degrees)")
    ap.add_argument("--position", nargs=3, type=float, metavar=("X", "Y", "Z"),
                    help="Dock origin in the world frame (meters)")

    ap.add_argument("--format", default="text", choices=sorted(OUTPUT_FORMATS))
    ap.add_argument("--out", help="Write output to this file instead of stdout")
    ap.add_argument("--precision", type=int, default=4, help="Decimals for text/lua output")
    ap.add_argument("--log-file")
    ap.add_argument("--verbose", "-v", action="store_true")

    return ap


def _pick_angle(name: str, radians: Optional[float], degrees: Optional[float]) -> Optional[float]:
    if radians is not None and degrees is not None:
        raise InvalidArgument(f"give either --{name} or --{name}-deg, not both")
    if degrees is not None:
        return math.radians(degrees)
    return radians


def _apply_args(cfg: DockConfig, args: argparse.Namespace) -> DockConfig:
    return cfg.apply_overrides(
        drawing_unit=args.unit,
        dock_roll_angle=_pick_angle("roll", args.roll, args.roll_deg),
        dock_yaw_angle=_pick_angle("yaw", args.yaw, args.yaw_deg),
        dock_position=tuple(args.position) if args.position is not None else None,
    )


def main(argv: Optional[list[str]] = None) -> int:
    ap = _build_parser()
    args = ap.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logger = setup_logger("cli", level)

    file_handler = None
    try:
        cfg = load_config(args.config) if args.config else default_config()
        cfg = _apply_args(cfg, args)

        logger = setup_logger(cfg.name, level)
        if args.log_file:
            file_handler = add_file_handler(logger, cfg.name, args.log_file)

        sink = build_output(args.format, args.out, precision=args.precision)
        DockMarkerCalculator(cfg, logger=logger, outputs=[sink]).run()

        if args.out:
            logger.info("wrote %s output to %s", args.format, args.out)
    except (InvalidArgument, FileNotFoundError) as e:
        logger.error("configuration error: %s", e)
        return 2
    finally:
        if file_handler is not None:
            logger.removeHandler(file_handler)
            file_handler.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
