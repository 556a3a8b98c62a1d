"""
Entry-point for the tape-pair range finder.

Reads the FRC camera config (``/boot/frc.json`` by default), connects to the
robot's NetworkTables server as a client and publishes one reading per
processed frame to the ``PI_Output`` table:

    DistanceToRobotInches        -1 when the two range estimates disagree
    DistanceRightToRobotInches   positive = tape pair right of center
    AngleOfRobotToTapeRadians    reserved; 0 when valid, 360 when not

Use ``--dry-run`` on a bench to print readings instead.
"""
from __future__ import annotations

import argparse
import sys

from tape_vision.common import ConfigurationError
from tape_vision.config import DEFAULT_CONFIG_FILE, load_config
from tape_vision.processor import VisionProcessor
from tape_vision.publisher import ConsoleSink, connect_network_tables


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Range finder for retro-reflective tape pairs")
    parser.add_argument("config", nargs="?", default=DEFAULT_CONFIG_FILE, help="camera config JSON")
    parser.add_argument("--nt-server", default=None, help="override NetworkTables server address")
    parser.add_argument("--dry-run", action="store_true", help="print readings instead of publishing")
    parser.add_argument("--all-cameras", action="store_true", help="process every configured camera")
    parser.add_argument("--verbose", action="store_true", help="log skipped frames")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    # -------------------- Config blobs --------------------
    try:
        cfg = load_config(args.config)
    except ConfigurationError as exc:
        print(f"[Config] {exc}", file=sys.stderr)
        return 1
    if args.nt_server:
        cfg.publisher.server = args.nt_server

    # ------------------------ Banner ----------------------
    print("Initializing tape vision…")
    print(f"Team: {cfg.team}, cameras: {[c.name for c in cfg.cameras]}")
    for cam in cfg.cameras:
        print(f"Camera '{cam.name}': {cam.path}, {cam.width}x{cam.height}, HFOV={cam.horizontal_fov_deg}°")
    print(f"Gate: tolerance={cfg.gate.relative_tolerance:.0%}")

    # ------------------------ Run -------------------------
    # Geometry is checked before any network connection is made
    try:
        processor = VisionProcessor(
            cfg, process_all_cameras=args.all_cameras, verbose=args.verbose
        )
    except ConfigurationError as exc:
        print(f"[Config] {exc}", file=sys.stderr)
        return 1
    sink = ConsoleSink() if args.dry_run else connect_network_tables(cfg.publisher, cfg.team)
    processor.run(sink)
    print("Main program finished.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
