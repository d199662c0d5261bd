"""
Histogram density estimates on binary spatial partitions.
"""

from dataclasses import dataclass

from .labels import NodeLabel
from .pcfunction import PCFunction
from .rectangle import Point


def density_formula(count: int, volume: float, total: int) -> float:
    """Density of a cell holding `count` of `total` points in `volume`."""
    return count / (volume * total)


@dataclass(frozen=True)
class Histogram:
    """
    A point count per cell together with the overall number of points.

    `total` is expected to equal the sum of the cell counts; it is supplied
    by whoever counted the points and is not recomputed here.
    """
    total: int
    counts: PCFunction[int]

    def density(self, point: Point) -> float:
        """
        Histogram density at `point`.

        Raises:
            ZeroDivisionError: If `total` is 0 or the cell has zero volume
        """
        _, box, count = self.counts.apply(point)
        return density_formula(count, box.volume(), self.total)

    def density_at_node(self, at: NodeLabel) -> float:
        """Density on cell `at`; raises KeyError if `at` is not a cell."""
        box, count = self.counts.partition.leaf_value(at)
        return density_formula(count, box.volume(), self.total)
