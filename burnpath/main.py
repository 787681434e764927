#!/usr/bin/env python3
"""
BurnPath - Main Entry Point

Command line front end: import drawings and images into a scene and
write the G-code program.
Run with: python -m burnpath.main drawing.svg photo.png -o job.gcode
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .core.items import ImageObject
from .core.scene import Scene
from .errors import BurnPathError
from .host import FileSystemHost
from .io import import_file
from .laser.engrave import EngraveSettings
from .laser.gcode_generator import GCodeGenerator, GCodeSettings
from .laser.instructions import PowerScale
from .laser.scan import ScanSettings

logger = logging.getLogger("burnpath")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="burnpath",
        description="Convert SVG, DXF, HPGL and bitmap files to laser G-code.")
    parser.add_argument("inputs", nargs="+", help="Files to import")
    parser.add_argument("-o", "--output", default="output.gcode",
                        help="Output file name (default: output.gcode)")
    parser.add_argument("--width", type=float, default=400.0,
                        help="Document width in mm (default: 400)")
    parser.add_argument("--height", type=float, default=400.0,
                        help="Document height in mm (default: 400)")

    vector = parser.add_argument_group("engrave layers")
    vector.add_argument("--power", type=float, default=50.0, help="Engrave power")
    vector.add_argument("--feed", type=float, default=1000.0, help="Cutting speed (mm/min)")
    vector.add_argument("--passes", type=int, default=1, help="Passes per path")
    vector.add_argument("--flip-y", action=argparse.BooleanOptionalAction, default=True,
                        help="Convert Y-down drawing coordinates to Y-up machine coordinates")
    vector.add_argument("--optimize", action="store_true", help="Reorder paths to reduce travel")

    raster = parser.add_argument_group("scan layers")
    raster.add_argument("--line-density", type=float, default=10.0, help="Scan lines per mm")
    raster.add_argument("--halftone", action="store_true", help="Dithered on/off burning")
    raster.add_argument("--negative", action="store_true", help="Invert image brightness")
    raster.add_argument("--min-power", type=float, default=0.0)
    raster.add_argument("--max-power", type=float, default=100.0)
    raster.add_argument("--scan-feed", type=float, default=1000.0, help="Burn speed (mm/min)")
    raster.add_argument("--overscan", type=float, default=3.0, help="Overscan distance (mm)")

    parser.add_argument("--travel", type=float, default=6000.0, help="Travel speed (mm/min)")
    parser.add_argument("--byte-power", action="store_true",
                        help="Use S0-S255 instead of S0-S100")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def build_scene(paths, doc_width: float, doc_height: float) -> Scene:
    """Import every file into a fresh scene."""
    scene = Scene()
    for path in paths:
        for entry in import_file(path):
            if isinstance(entry, ImageObject):
                # Bitmaps are placed at the document centre
                scene = scene.add_item(replace(entry, x=doc_width / 2, y=doc_height / 2))
            else:
                scene = scene.add_records([entry])
        logger.info(f"Imported {Path(path).name}")
    return scene


def main(argv=None) -> int:
    """Main entry point for the BurnPath command line."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    power_scale = PowerScale.BYTE if args.byte_power else PowerScale.PERCENT
    scan_settings = ScanSettings(
        line_density=args.line_density,
        halftone=args.halftone,
        negative_image=args.negative,
        min_power=args.min_power,
        max_power=args.max_power,
        power_scale=power_scale,
        feed_rate=args.scan_feed,
        travel_speed=args.travel,
        overscan_distance=args.overscan,
    )
    engrave_settings = EngraveSettings(
        feed_rate=args.feed,
        travel_speed=args.travel,
        power=args.power,
        power_scale=power_scale,
        passes=args.passes,
        flip_y=args.flip_y,
        canvas_height=args.height,
        optimize_order=args.optimize,
    )
    generator = GCodeGenerator(GCodeSettings(power_scale=power_scale,
                                             travel_speed=args.travel))
    host = FileSystemHost(Path(args.output).parent or ".")

    try:
        scene = build_scene(args.inputs, args.width, args.height)
        gcode, warnings = generator.generate(scene, args.width, args.height,
                                             scan_settings, engrave_settings,
                                             host.canvas_size())
    except (BurnPathError, OSError) as e:
        logger.error(str(e))
        return 1

    if gcode is None:
        logger.error("Nothing to engrave: " + "; ".join(warnings))
        return 1
    host.save_output(Path(args.output).name, gcode)
    return 0


if __name__ == "__main__":
    sys.exit(main())
