"""
Axis-aligned boxes in d-dimensional space.

This module defines the rectangle representation used as the cell geometry
of every binary spatial partition, plus the hull reduction used to compute
bounding boxes over arbitrarily large point collections.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import reduce
from typing import Iterable, Optional, Sequence, Tuple


Point = Sequence[float]


@dataclass(frozen=True)
class Rectangle:
    """
    An axis-aligned box [low[0], high[0]] x ... x [low[d-1], high[d-1]].

    Bounds are stored as tuples of floats so rectangles are hashable and
    safe to share between partitions.
    """
    low: Tuple[float, ...]
    high: Tuple[float, ...]

    def __post_init__(self):
        low = tuple(float(x) for x in self.low)
        high = tuple(float(x) for x in self.high)
        if len(low) != len(high):
            raise ValueError(
                f"Invalid rectangle: low has {len(low)} axes, high has {len(high)}"
            )
        if not low:
            raise ValueError("Invalid rectangle: at least one axis is required")
        for axis, (lo, hi) in enumerate(zip(low, high)):
            if lo > hi:
                raise ValueError(
                    f"Invalid rectangle: low={lo} > high={hi} on axis {axis}"
                )
        object.__setattr__(self, "low", low)
        object.__setattr__(self, "high", high)

    def __str__(self) -> str:
        return "x".join(f"[{lo}, {hi}]" for lo, hi in zip(self.low, self.high))

    def dim(self) -> int:
        """Number of axes."""
        return len(self.high)

    def centre(self, axis: int) -> float:
        """Midpoint of the box along `axis`."""
        return (self.high[axis] + self.low[axis]) / 2

    def split(
        self, axis: int, intercept: Optional[float] = None
    ) -> Tuple[Rectangle, Rectangle]:
        """
        Cut the box with the hyperplane x[axis] = intercept.

        Args:
            axis: Axis to cut along
            intercept: Position of the cut, clamped into the box. Defaults
                to the centre of the box along `axis`.

        Returns:
            Tuple of (lower, upper) rectangles
        """
        if intercept is None:
            intercept = self.centre(axis)
        c = min(max(intercept, self.low[axis]), self.high[axis])

        lower_high = self.high[:axis] + (c,) + self.high[axis + 1:]
        upper_low = self.low[:axis] + (c,) + self.low[axis + 1:]
        return Rectangle(self.low, lower_high), Rectangle(upper_low, self.high)

    def lower(self, axis: int, intercept: Optional[float] = None) -> Rectangle:
        return self.split(axis, intercept)[0]

    def upper(self, axis: int, intercept: Optional[float] = None) -> Rectangle:
        return self.split(axis, intercept)[1]

    def volume(self) -> float:
        """Product of the side lengths (0.0 for a degenerate box)."""
        v = 1.0
        for lo, hi in zip(self.low, self.high):
            v *= hi - lo
        return v

    def contains(self, point: Point) -> bool:
        """Check if `point` lies in the box, boundary included."""
        return all(
            lo <= x <= hi for lo, x, hi in zip(self.low, point, self.high)
        )


def hull(a: Rectangle, b: Rectangle) -> Rectangle:
    """Smallest rectangle containing both `a` and `b`."""
    return Rectangle(
        tuple(min(x, y) for x, y in zip(a.low, b.low)),
        tuple(max(x, y) for x, y in zip(a.high, b.high)),
    )


def point_box(point: Point) -> Rectangle:
    """Degenerate rectangle covering a single point."""
    return Rectangle(point, point)


def bounding_box(points: Iterable[Point]) -> Rectangle:
    """
    Bounding box of a collection of points.

    `hull` is associative and commutative, so partial boxes computed over
    chunks of the input may be combined with `hull` in any order.

    Args:
        points: Any iterable of points, consumed once

    Returns:
        The hull of all points

    Raises:
        ValueError: If `points` is empty
    """
    boxes = map(point_box, points)
    first = next(boxes, None)
    if first is None:
        raise ValueError("Cannot compute the bounding box of no points")
    return reduce(hull, boxes, first)
