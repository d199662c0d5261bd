"""
Point source interface for histogram construction.

This module defines the point source protocol the builder consumes and
provides simple in-memory implementations. A point source only has to
stream its points; bounding boxes and cell counts are derived from that
stream unless a subclass can compute them more efficiently.
"""

import logging
from abc import ABC, abstractmethod
from collections import Counter
from itertools import islice
from typing import Callable, Iterable, Iterator, List, Sequence, Tuple

from .pcfunction import PCFunction
from .rectangle import Point, Rectangle, bounding_box


logger = logging.getLogger(__name__)


class PointSource(ABC):
    """
    Abstract base class for collections of d-dimensional points.

    The collection may be far too large to hold in memory; every operation
    is a single pass over `iter_points()`.
    """

    @abstractmethod
    def iter_points(self) -> Iterator[Tuple[float, ...]]:
        """
        Stream all points.

        Returns:
            A fresh iterator over the points each time it is called
        """
        pass

    def bounding_box(self) -> Rectangle:
        """
        Bounding box of all points.

        Default implementation reduces `hull` over the point stream.
        Subclasses may override with a parallel aggregate.

        Raises:
            ValueError: If the source is empty
        """
        return bounding_box(self.iter_points())

    def iter_batches(self, batch_size: int) -> Iterator[List[Tuple[float, ...]]]:
        """
        Stream all points in lists of at most `batch_size`.

        Default implementation chunks `iter_points()`.

        Raises:
            ValueError: If batch_size is less than 1
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        points = self.iter_points()
        while True:
            batch = list(islice(points, batch_size))
            if not batch:
                return
            yield batch

    def count(self) -> int:
        """Number of points."""
        return sum(1 for _ in self.iter_points())

    def count_cells(self, pcf: PCFunction, batch_size: int = 10000) -> Counter:
        """
        Count points per cell of a partition.

        Cells without points are absent from the result.

        Args:
            pcf: Piecewise constant function whose cells to count into
            batch_size: Points pulled from the source at a time

        Returns:
            Counter mapping cell label -> number of points
        """
        counts: Counter = Counter()
        seen = 0
        for batch in self.iter_batches(batch_size):
            for p in batch:
                lab, _, _ = pcf.apply(p)
                counts[lab] += 1
            seen += len(batch)
            logger.debug("Counted %d points", seen)
        return counts


class InMemoryPointSource(PointSource):
    """Point source over a list of points held in memory."""

    def __init__(self, points: Iterable[Point]):
        self._points: List[Tuple[float, ...]] = [tuple(float(x) for x in p) for p in points]

    def iter_points(self) -> Iterator[Tuple[float, ...]]:
        return iter(self._points)

    def count(self) -> int:
        return len(self._points)


class FunctionPointSource(PointSource):
    """
    Point source wrapper for a generator function.

    Wraps a callable returning a new iterable of points on every call.
    """

    def __init__(self, factory: Callable[[], Iterable[Sequence[float]]]):
        self._factory = factory

    def iter_points(self) -> Iterator[Tuple[float, ...]]:
        for p in self._factory():
            yield tuple(float(x) for x in p)


def cell_counts(pcf: PCFunction, counts: Counter) -> PCFunction[int]:
    """Install `counts` as the values of `pcf` (0 for cells with no points)."""
    return pcf.map_values(lambda lab, _: counts.get(lab, 0))
