"""
Command-line entry point: python -m seamcarve INPUT --width W --height H
"""

import argparse
import logging
import sys
from typing import List, Optional

from .carving import Carver
from .config import AXIS_ORDERS, frame_interval, target_from_scale, target_with_aspect
from .errors import SeamCarvingError
from .image_io import (FrameExporter, FrameRecorder, combine_snapshots, default_output_path,
                       load_grid, save_grid, write_timeline_gif)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stdout,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='seamcarve',
        description="Content-aware image shrinking with seam carving"
    )
    parser.add_argument('input', type=str, help='Input image')
    parser.add_argument(
        '-o', '--output',
        type=str,
        help='Output image (default: <input>_resized.<ext> next to the input)'
    )
    parser.add_argument('--width', type=int, help='Target width in pixels')
    parser.add_argument('--height', type=int, help='Target height in pixels')
    parser.add_argument(
        '--scale',
        type=float,
        help='Target size as a percentage of the original (overrides --width/--height)'
    )
    parser.add_argument(
        '--keep-aspect',
        action='store_true',
        help='Derive the missing dimension from the aspect ratio'
    )
    parser.add_argument(
        '--axis-order',
        choices=AXIS_ORDERS,
        default='alternate',
        help='How vertical and horizontal seams are interleaved (default: alternate)'
    )
    parser.add_argument('--frames-dir', type=str, help='Write progress frames here')
    parser.add_argument('--gif', type=str, help='Write progress frames as an animated GIF')
    cadence = parser.add_mutually_exclusive_group()
    cadence.add_argument(
        '--snapshot-interval',
        type=int,
        default=None,
        help='Seams between progress frames (default: 1)'
    )
    cadence.add_argument(
        '--max-frames',
        type=int,
        default=None,
        help='Pick the interval so at most this many frames are produced'
    )
    parser.add_argument(
        '--incremental',
        action='store_true',
        help='Update energy around each removed seam instead of recomputing it'
    )
    parser.add_argument(
        '--log-level',
        default='INFO',
        help='Logging level (default: INFO)'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)

    try:
        grid = load_grid(args.input)
        logger.info(f"Original size: {(grid.width, grid.height)}")

        if args.scale is not None:
            target_w, target_h = target_from_scale(grid.width, grid.height, args.scale)
        elif args.keep_aspect:
            target_w, target_h = target_with_aspect(grid.width, grid.height,
                                                    args.width, args.height)
        else:
            target_w = grid.width if args.width is None else args.width
            target_h = grid.height if args.height is None else args.height

        total = max(0, grid.width - target_w) + max(0, grid.height - target_h)
        if args.max_frames is not None:
            interval = frame_interval(total, args.max_frames)
        elif args.snapshot_interval is not None:
            interval = args.snapshot_interval
        else:
            interval = 1

        exporters = []
        recorder = FrameRecorder() if args.gif else None
        if recorder is not None:
            recorder(grid)
            exporters.append(recorder)
        if args.frames_dir:
            exporters.append(FrameExporter(args.frames_dir))

        carver = Carver(grid, target_w, target_h,
                        on_snapshot=combine_snapshots(*exporters) if exporters else None,
                        snapshot_interval=interval,
                        axis_order=args.axis_order,
                        incremental_energy=args.incremental)
        logger.info(f"Removing {carver.vertical_left} vertical and "
                    f"{carver.horizontal_left} horizontal seams")

        for step in carver:
            if step.seams_removed % max(1, total // 10) == 0:
                logger.info(f"  {step.seams_removed}/{step.total_seams} seams "
                            f"({step.width}x{step.height}), {step.elapsed:.1f}s elapsed, "
                            f"~{step.eta:.1f}s left")

        output = args.output or default_output_path(args.input)
        save_grid(carver.grid, output)
        logger.info(f"Saved {output} ({carver.grid.width}x{carver.grid.height})")

        if recorder is not None:
            if recorder.frames[-1].shape != carver.grid.shape:
                recorder(carver.grid)
            write_timeline_gif(recorder.frames, args.gif)

        if carver.snapshot_errors:
            logger.warning(f"{len(carver.snapshot_errors)} progress frame(s) could not be written")
    except SeamCarvingError as exc:
        logger.error(f"Error: {exc}")
        return 1

    return 0
