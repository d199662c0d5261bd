"""
Labels of the infinite binary tree.

Every node of the infinite binary tree is named by a positive integer: the
root is 1, and the children of node n are 2n (left) and 2n + 1 (right).
Reading the binary expansion after the leading 1 gives the path from the
root (0 = left, 1 = right), so all structural relations reduce to shifts
and comparisons and no tree ever has to be allocated.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import FrozenSet, Iterator


@dataclass(frozen=True, order=True)
class NodeLabel:
    """A node of the infinite binary tree."""
    lab: int

    def __post_init__(self):
        if self.lab < 1:
            raise ValueError(f"Invalid node label: {self.lab}")

    def __repr__(self) -> str:
        return f"NodeLabel({self.lab})"

    def left(self) -> NodeLabel:
        return NodeLabel(2 * self.lab)

    def right(self) -> NodeLabel:
        return NodeLabel(2 * self.lab + 1)

    def is_left(self) -> bool:
        return not self.lab & 1

    def is_right(self) -> bool:
        return bool(self.lab & 1)

    def depth(self) -> int:
        """Distance from the root (the root has depth 0)."""
        return self.lab.bit_length() - 1

    def ancestor(self, levels: int) -> NodeLabel:
        """
        The ancestor `levels` steps up.

        `levels` must not exceed `depth()`; going past the root produces an
        invalid label.
        """
        return NodeLabel(self.lab >> levels)

    def parent(self) -> NodeLabel:
        return self.ancestor(1)

    def sibling(self) -> NodeLabel:
        return NodeLabel(self.lab ^ 1)

    def children(self) -> FrozenSet[NodeLabel]:
        return frozenset((self.left(), self.right()))

    def ancestors(self) -> Iterator[NodeLabel]:
        """Strict ancestors, nearest first, ending with the root."""
        lab = self.lab >> 1
        while lab >= 1:
            yield NodeLabel(lab)
            lab >>= 1


ROOT_LABEL = NodeLabel(1)


def is_ancestor_of(a: NodeLabel, b: NodeLabel) -> bool:
    """True iff `a` is a strict ancestor of `b`."""
    return a.lab < b.lab and (b.lab >> (b.depth() - a.depth())) == a.lab


def is_descendant_of(a: NodeLabel, b: NodeLabel) -> bool:
    """True iff `a` is a strict descendant of `b`."""
    return is_ancestor_of(b, a)
