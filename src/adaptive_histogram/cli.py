"""
Command-line interface for adaptive-histogram.

Provides commands for inspecting point files and building histograms.
"""

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .builder import BuilderConfig, HistogramBuilder, build_histogram
from .duckdb_source import create_source_from_file
from .source import InMemoryPointSource


def _parse_columns(value: str) -> List[str]:
    return [c.strip() for c in value.split(",") if c.strip()]


def _parse_point(value: str) -> Tuple[float, ...]:
    try:
        return tuple(float(x) for x in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid point: {value!r}")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="adaptive-histogram",
        description="Build and query histograms on binary spatial partitions",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Bounding box command
    bbox_parser = subparsers.add_parser(
        "bbox",
        help="Print the bounding box of a point file",
    )
    bbox_parser.add_argument("input", type=Path, help="CSV or Parquet point file")
    bbox_parser.add_argument(
        "-c", "--columns",
        type=_parse_columns,
        default=None,
        help="Comma-separated axis columns (default: all numeric columns)",
    )

    # Build command
    build_parser = subparsers.add_parser(
        "build",
        help="Build a histogram and query its density",
    )
    build_parser.add_argument("input", type=Path, help="CSV or Parquet point file")
    build_parser.add_argument(
        "-c", "--columns",
        type=_parse_columns,
        default=None,
        help="Comma-separated axis columns (default: all numeric columns)",
    )
    build_parser.add_argument(
        "-d", "--depth",
        type=int,
        default=4,
        help="Number of times every cell is halved (default: 4)",
    )
    build_parser.add_argument(
        "--batch-size",
        type=int,
        default=10000,
        help="Rows fetched per round trip (default: 10000)",
    )
    build_parser.add_argument(
        "-q", "--query",
        type=_parse_point,
        action="append",
        default=[],
        help="Point to evaluate the density at, e.g. 0.5,1.2 (repeatable)",
    )
    build_parser.add_argument(
        "--cells",
        action="store_true",
        help="Print every cell with its count",
    )

    # Stats command
    stats_parser = subparsers.add_parser(
        "stats",
        help="Show partition statistics for a given dimension and depth",
    )
    stats_parser.add_argument(
        "-n", "--dim",
        type=int,
        default=2,
        help="Number of axes (default: 2)",
    )
    stats_parser.add_argument(
        "-d", "--depth",
        type=int,
        default=4,
        help="Refinement depth (default: 4)",
    )

    return parser


def cmd_bbox(args: argparse.Namespace) -> int:
    """Handle the bbox command."""
    with create_source_from_file(args.input, args.columns) as source:
        box = source.bounding_box()
        print(f"Axes: {', '.join(source.columns)}")
        print(f"Points: {source.count()}")
        print(f"Bounding box: {box}")
        print(f"Volume: {box.volume()}")
    return 0


def cmd_build(args: argparse.Namespace) -> int:
    """Handle the build command."""
    print(f"Building histogram of {args.input} with depth {args.depth}...")

    with create_source_from_file(args.input, args.columns, args.batch_size) as source:
        histogram, stats = build_histogram(
            source, depth=args.depth, batch_size=args.batch_size
        )
        dim = source.dim

    # Print stats
    print(f"\nBuild statistics:")
    print(f"  Cells created: {stats.cells_created}")
    print(f"  Splits performed: {stats.splits_performed}")
    print(f"  Internal nodes: {stats.internal_nodes}")
    print(f"  Points counted: {stats.points_counted}")
    print(f"  Empty cells: {stats.empty_cells}")
    print(f"  Max depth reached: {stats.max_depth_reached}")

    if args.cells:
        print("\nCells:")
        for lab, box, count in sorted(histogram.counts.cells(), key=lambda c: c[0].lab):
            print(f"  {lab.lab:>8} {box} {count}")

    if args.query:
        print("\nDensities:")
    for point in args.query:
        if len(point) != dim:
            print(f"Error: point {point} has {len(point)} axes, expected {dim}")
            return 1
        lab, box, count = histogram.counts.apply(point)
        try:
            density = histogram.density(point)
        except ZeroDivisionError:
            density = float("nan")
        print(f"  {point}: cell {lab.lab} {box} count={count} density={density}")

    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Handle the stats command."""
    # Two opposite corners span the unit cube
    corners = InMemoryPointSource([[0.0] * args.dim, [1.0] * args.dim])
    builder = HistogramBuilder(corners, BuilderConfig(depth=args.depth))
    histogram = builder.build()
    stats = builder.stats

    root_box = histogram.counts.root_box
    _, cell, _ = histogram.counts.cells()[0]

    print(f"Partition statistics for dimension {args.dim}, depth {args.depth}:")
    print(f"  Cells: {len(histogram.counts.partition)}")
    print(f"  Internal nodes: {stats.internal_nodes}")
    print(f"  Cell volume fraction: {cell.volume() / root_box.volume()}")
    for axis in range(args.dim):
        side = cell.high[axis] - cell.low[axis]
        cuts = round(-math.log2(side))
        print(f"  Axis {axis}: halved {cuts} times")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    if args.command is None:
        parser.print_help()
        return 1

    try:
        if args.command == "bbox":
            return cmd_bbox(args)
        elif args.command == "build":
            return cmd_build(args)
        elif args.command == "stats":
            return cmd_stats(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
