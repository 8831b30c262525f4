"""Command-line inspection of DCD files."""

from __future__ import annotations

import argparse
import logging
import sys

from .config import DEFAULT_MAX_TITLE_LINES, DecoderConfig
from .errors import DCDFormatError
from .io.formats.dcd import read_dcd
from .report import TrajectoryPrinter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dcdcore-info", description="Describe a DCD trajectory file."
    )
    parser.add_argument("file", help="Path to DCD file.")
    parser.add_argument(
        "--frames", action="store_true", help="Also print every frame's coordinates."
    )
    parser.add_argument(
        "--strict", action="store_true", help="Treat recoverable anomalies as errors."
    )
    parser.add_argument(
        "--no-unit-cells", action="store_true", help="Skip unit-cell records."
    )
    parser.add_argument(
        "--max-title-lines",
        type=int,
        default=DEFAULT_MAX_TITLE_LINES,
        help="Title line counts above this are treated as corrupt.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI; returns the exit status."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = DecoderConfig(
            max_title_lines=args.max_title_lines,
            strict=args.strict,
            read_unit_cells=not args.no_unit_cells,
        )
        trajectory = read_dcd(args.file, config)
    except FileNotFoundError:
        logger.error("File not found: %s", args.file)
        return 1
    except DCDFormatError as e:
        logger.error("Invalid DCD file %s: %s", args.file, e)
        return 1
    except ValueError as e:
        logger.error("Invalid option: %s", e)
        return 2

    TrajectoryPrinter().print(trajectory, frames=args.frames)
    return 0


if __name__ == "__main__":
    sys.exit(main())
