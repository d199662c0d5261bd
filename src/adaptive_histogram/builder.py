"""
Histogram builder using uniform refinement.

This module composes the partition primitives the way a splitting policy
would: seed a single cell on the bounding box of the data, split cells,
then run a counting pass over the points and install the counts. The
refinement rule here is the simplest one possible (split every cell a
fixed number of times); data-driven rules plug in at `_refine`.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from .histogram import Histogram
from .pcfunction import PCFunction, constant_pcfunction
from .source import PointSource, cell_counts


logger = logging.getLogger(__name__)


@dataclass
class BuilderConfig:
    """Configuration for the histogram builder."""

    depth: int = 4
    """Number of times every cell is halved."""

    batch_size: int = 10000
    """Points pulled from the source at a time while counting."""

    def __post_init__(self):
        if self.depth < 0:
            raise ValueError("depth must be non-negative")
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")


@dataclass
class BuilderStats:
    """Statistics collected during histogram building."""

    cells_created: int = 0
    splits_performed: int = 0
    internal_nodes: int = 0
    points_counted: int = 0
    empty_cells: int = 0
    max_depth_reached: int = 0


def _no_counts(_: int) -> Tuple[int, int]:
    return 0, 0


class HistogramBuilder:
    """
    Builder for histograms over a point source.

    The builder constructs a histogram by:
    1. Taking the bounding box of the source as the root cell
    2. Halving every cell `config.depth` times
    3. Counting the points that fall into each resulting cell
    """

    def __init__(self, source: PointSource, config: BuilderConfig):
        """
        Initialize the builder.

        Args:
            source: Points to build the histogram over
            config: Builder configuration
        """
        self.source = source
        self.config = config
        self.stats = BuilderStats()

    def build(self) -> Histogram:
        """
        Build the histogram.

        Returns:
            Histogram whose total is the number of points counted

        Raises:
            ValueError: If the source is empty
        """
        self.stats = BuilderStats()  # Reset stats

        box = self.source.bounding_box()
        logger.info("Bounding box %s", box)

        pcf = constant_pcfunction(box, 0)
        self.stats.cells_created = 1
        pcf = self._refine(pcf)

        counts = self.source.count_cells(pcf, batch_size=self.config.batch_size)
        total = sum(counts.values())
        pcf = cell_counts(pcf, counts)

        self.stats.points_counted = total
        self.stats.empty_cells = sum(1 for _, _, c in pcf.cells() if c == 0)
        self.stats.internal_nodes = sum(1 for _ in pcf.partition.dft_internal())
        logger.info(
            "Built histogram with %d cells over %d points",
            len(pcf.partition), total,
        )
        return Histogram(total, pcf)

    def _refine(self, pcf: PCFunction[int]) -> PCFunction[int]:
        """Halve every cell, `config.depth` rounds."""
        for level in range(self.config.depth):
            labels = pcf.partition.leaf_nodes()
            pcf = pcf.split_cells(labels, _no_counts)
            self.stats.splits_performed += len(labels)
            self.stats.cells_created += 2 * len(labels)
            self.stats.max_depth_reached = level + 1
            logger.debug("Refined to depth %d (%d cells)", level + 1, len(pcf.partition))
        return pcf


def build_histogram(
    source: PointSource,
    depth: int = 4,
    batch_size: int = 10000,
) -> Tuple[Histogram, BuilderStats]:
    """
    Convenience function to build a histogram.

    Args:
        source: Points to build over
        depth: Number of uniform refinement rounds
        batch_size: Points pulled from the source at a time while counting

    Returns:
        Tuple of (Histogram, BuilderStats)
    """
    config = BuilderConfig(depth=depth, batch_size=batch_size)
    builder = HistogramBuilder(source, config)
    histogram = builder.build()
    return histogram, builder.stats
