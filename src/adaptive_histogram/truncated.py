"""
Finite leaf-labelled truncations of the infinite binary tree.

A truncated tree is stored only as the mapping from its leaves to their
values. The leaves always form a frontier of the infinite tree (no leaf is
an ancestor of another), which holds by construction because the only way
to change the leaf set is to split a leaf or merge a cherry. The internal
nodes are never stored; they are recovered on demand from leaf membership.
"""

from __future__ import annotations
import logging
from typing import Callable, Dict, FrozenSet, Generic, Iterable, Iterator, List, Tuple, TypeVar

from .labels import NodeLabel, ROOT_LABEL


logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")


class TruncatedTree(Generic[A]):
    """
    A finite binary tree given by its leaves and their values.

    Instances are never modified; `split_leaf`, `split_leaves`,
    `merge_cherry` and `map_values` all return new trees.
    """

    __slots__ = ("_leaf_values",)

    def __init__(self, leaf_values: Dict[NodeLabel, A]):
        """
        Args:
            leaf_values: Mapping from leaf label to value. The keys must form
                a frontier; this is not checked.
        """
        self._leaf_values: Dict[NodeLabel, A] = dict(leaf_values)

    def __repr__(self) -> str:
        return f"TruncatedTree({self._leaf_values!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TruncatedTree):
            return NotImplemented
        return self._leaf_values == other._leaf_values

    def __len__(self) -> int:
        return len(self._leaf_values)

    def split_leaf(self, at: NodeLabel, by: Callable[[A], Tuple[A, A]]) -> TruncatedTree[A]:
        """
        Replace leaf `at` by its two children.

        Args:
            at: A current leaf
            by: Maps the value at `at` to the (left, right) child values

        Returns:
            The refined tree

        Raises:
            KeyError: If `at` is not a leaf
        """
        lvalue, rvalue = by(self._leaf_values[at])
        leaf_values = dict(self._leaf_values)
        del leaf_values[at]
        leaf_values[at.left()] = lvalue
        leaf_values[at.right()] = rvalue
        logger.debug("Split leaf %d", at.lab)
        return TruncatedTree(leaf_values)

    def split_leaves(
        self, at: Iterable[NodeLabel], by: Callable[[NodeLabel, A], Tuple[A, A]]
    ) -> TruncatedTree[A]:
        """
        Replace several leaves by their children in one pass.

        Equivalent to calling `split_leaf` on each label in turn, but copies
        the leaf mapping only once.

        Args:
            at: Distinct current leaves
            by: Maps (label, value) to the (left, right) child values

        Returns:
            The refined tree

        Raises:
            KeyError: If a label is not a leaf
        """
        leaf_values = dict(self._leaf_values)
        count = 0
        for lab in at:
            lvalue, rvalue = by(lab, leaf_values.pop(lab))
            leaf_values[lab.left()] = lvalue
            leaf_values[lab.right()] = rvalue
            count += 1
        logger.debug("Split %d leaves", count)
        return TruncatedTree(leaf_values)

    def merge_cherry(self, at: NodeLabel, by: Callable[[A, A], A]) -> TruncatedTree[A]:
        """
        Replace the two leaf children of `at` by `at` itself.

        Args:
            at: Parent of a cherry (both children are current leaves)
            by: Maps the (left, right) child values to the merged value

        Returns:
            The coarsened tree

        Raises:
            KeyError: If either child of `at` is not a leaf
        """
        left, right = at.left(), at.right()
        value = by(self._leaf_values[left], self._leaf_values[right])
        leaf_values = dict(self._leaf_values)
        del leaf_values[left]
        del leaf_values[right]
        leaf_values[at] = value
        logger.debug("Merged cherry at %d", at.lab)
        return TruncatedTree(leaf_values)

    def map_values(self, fn: Callable[[NodeLabel, A], B]) -> TruncatedTree[B]:
        """Tree with the same leaves and values replaced by fn(label, value)."""
        return TruncatedTree({lab: fn(lab, v) for lab, v in self._leaf_values.items()})

    def leaf_nodes(self) -> FrozenSet[NodeLabel]:
        return frozenset(self._leaf_values)

    def has_leaf(self, at: NodeLabel) -> bool:
        return at in self._leaf_values

    def leaf_value(self, at: NodeLabel) -> A:
        """Value at leaf `at`; raises KeyError if `at` is not a leaf."""
        return self._leaf_values[at]

    def leaves(self) -> List[Tuple[NodeLabel, A]]:
        return list(self._leaf_values.items())

    def dft_internal_from(self, start: NodeLabel) -> Iterator[NodeLabel]:
        """
        Internal nodes below `start` in depth-first pre-order.

        `start` must be an internal node (or the sequence is empty if it is a
        leaf). From an internal node the walk descends left; if the left
        child is a leaf it descends right instead; if the right child is a
        leaf too it climbs until it finds a left child whose sibling is
        internal and continues at that sibling, or stops on reaching `start`.

        Args:
            start: Root of the subtree to traverse

        Yields:
            Labels of internal nodes, `start` first
        """
        if self.has_leaf(start):
            return

        lab = start
        while True:
            yield lab

            if not self.has_leaf(lab.left()):
                lab = lab.left()
                continue
            if not self.has_leaf(lab.right()):
                lab = lab.right()
                continue

            node = lab
            while node != start and not (node.is_left() and not self.has_leaf(node.sibling())):
                node = node.parent()
            if node == start:
                return
            lab = node.sibling()

    def dft_internal(self) -> Iterator[NodeLabel]:
        """All internal nodes in depth-first pre-order."""
        return self.dft_internal_from(ROOT_LABEL)


def root_tree(value: A) -> TruncatedTree[A]:
    """The tree whose only leaf is the root."""
    return TruncatedTree({ROOT_LABEL: value})
