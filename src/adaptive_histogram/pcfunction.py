"""
Piecewise-constant functions on binary spatial partitions.

A root rectangle is recursively halved, the cut at depth k being made along
axis k mod d through the centre of the current cell. The cell of tree node
n is the box reached by following the path encoded in n. A piecewise
constant function keeps one value per cell of a truncated tree, stored
together with the cell's rectangle.
"""

from __future__ import annotations
import logging
from typing import Callable, Generic, Iterable, Iterator, List, Tuple, TypeVar

from .labels import NodeLabel, ROOT_LABEL
from .rectangle import Point, Rectangle, hull
from .truncated import TruncatedTree, root_tree


logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")


def descend_spatial_tree(root_box: Rectangle, point: Point) -> Iterator[Tuple[Rectangle, NodeLabel]]:
    """
    Infinite sequence of ever smaller cells containing `point`.

    Points on a cut go to the lower (left) cell.

    Args:
        root_box: Cell of the root node
        point: Query point

    Yields:
        (box, label) pairs, starting with (root_box, ROOT_LABEL)
    """
    d = root_box.dim()
    box, lab = root_box, ROOT_LABEL
    while True:
        yield box, lab
        along = lab.depth() % d
        if point[along] <= box.centre(along):
            box, lab = box.lower(along), lab.left()
        else:
            box, lab = box.upper(along), lab.right()


class PCFunction(Generic[A]):
    """
    A function constant on each cell of a finite binary spatial partition.

    Each leaf of `partition` carries (cell rectangle, value).
    """

    __slots__ = ("_root_box", "_partition")

    def __init__(self, root_box: Rectangle, partition: TruncatedTree[Tuple[Rectangle, A]]):
        self._root_box = root_box
        self._partition = partition

    @property
    def root_box(self) -> Rectangle:
        return self._root_box

    @property
    def partition(self) -> TruncatedTree[Tuple[Rectangle, A]]:
        return self._partition

    def __repr__(self) -> str:
        return f"PCFunction(root_box={self.root_box}, cells={len(self.partition)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PCFunction):
            return NotImplemented
        return self.root_box == other.root_box and self.partition == other.partition

    def _query_node(self, point: Point) -> NodeLabel:
        for _, lab in descend_spatial_tree(self.root_box, point):
            if self.partition.has_leaf(lab):
                return lab

    def apply(self, point: Point) -> Tuple[NodeLabel, Rectangle, A]:
        """
        Find the cell containing `point`.

        Args:
            point: Query point, expected to lie in `root_box`

        Returns:
            Tuple of (label, cell rectangle, value)
        """
        lab = self._query_node(point)
        box, value = self.partition.leaf_value(lab)
        return lab, box, value

    __call__ = apply

    def value_at(self, at: NodeLabel) -> A:
        """Value of cell `at`; raises KeyError if `at` is not a cell."""
        return self.partition.leaf_value(at)[1]

    def split_cell(self, at: NodeLabel, by: Callable[[A], Tuple[A, A]]) -> PCFunction[A]:
        """
        Halve cell `at` along axis depth(at) mod d.

        Args:
            at: A current cell
            by: Maps the cell value to the (lower, upper) values

        Returns:
            The refined function
        """
        along = at.depth() % self.root_box.dim()

        def actual_by(cell: Tuple[Rectangle, A]) -> Tuple[Tuple[Rectangle, A], Tuple[Rectangle, A]]:
            box, value = cell
            lvalue, rvalue = by(value)
            lbox, rbox = box.split(along)
            return (lbox, lvalue), (rbox, rvalue)

        return PCFunction(self.root_box, self.partition.split_leaf(at, actual_by))

    def split_cells(self, at: Iterable[NodeLabel], by: Callable[[A], Tuple[A, A]]) -> PCFunction[A]:
        """
        Halve several cells at once.

        The result equals applying `split_cell` to each label in turn.

        Args:
            at: Distinct current cells
            by: Maps a cell value to the (lower, upper) values

        Returns:
            The refined function
        """
        d = self.root_box.dim()

        def actual_by(lab: NodeLabel, cell: Tuple[Rectangle, A]) -> Tuple[Tuple[Rectangle, A], Tuple[Rectangle, A]]:
            box, value = cell
            lvalue, rvalue = by(value)
            lbox, rbox = box.split(lab.depth() % d)
            return (lbox, lvalue), (rbox, rvalue)

        partition = self.partition.split_leaves(at, actual_by)
        logger.debug("Partition now has %d cells", len(partition))
        return PCFunction(self.root_box, partition)

    def merge_cell(self, at: NodeLabel, by: Callable[[A, A], A]) -> PCFunction[A]:
        """
        Join the two child cells of `at` back into one.

        Args:
            at: Parent of two current cells
            by: Maps the (lower, upper) values to the merged value

        Returns:
            The coarsened function
        """
        def actual_by(lcell: Tuple[Rectangle, A], rcell: Tuple[Rectangle, A]) -> Tuple[Rectangle, A]:
            return hull(lcell[0], rcell[0]), by(lcell[1], rcell[1])

        return PCFunction(self.root_box, self.partition.merge_cherry(at, actual_by))

    def map_values(self, fn: Callable[[NodeLabel, A], B]) -> PCFunction[B]:
        """Same partition with each value replaced by fn(label, value)."""
        return PCFunction(
            self.root_box,
            self.partition.map_values(lambda lab, cell: (cell[0], fn(lab, cell[1]))),
        )

    def cells(self) -> List[Tuple[NodeLabel, Rectangle, A]]:
        return [(lab, box, value) for lab, (box, value) in self.partition.leaves()]


def constant_pcfunction(root_box: Rectangle, value: A) -> PCFunction[A]:
    """The function equal to `value` on all of `root_box`."""
    return PCFunction(root_box, root_tree((root_box, value)))
