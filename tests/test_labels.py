"""Tests for infinite binary tree labels."""

import itertools

import pytest
from adaptive_histogram.labels import (
    NodeLabel,
    ROOT_LABEL,
    is_ancestor_of,
    is_descendant_of,
)


LABELS = [NodeLabel(n) for n in range(1, 300)]


class TestNodeLabel:
    """Tests for NodeLabel class."""

    def test_root(self):
        """Test the root label."""
        assert ROOT_LABEL == NodeLabel(1)
        assert ROOT_LABEL.depth() == 0
        assert list(ROOT_LABEL.ancestors()) == []

    def test_invalid_label(self):
        """Test that non-positive labels raise errors."""
        with pytest.raises(ValueError):
            NodeLabel(0)
        with pytest.raises(ValueError):
            NodeLabel(-4)

    def test_children(self):
        """Test left and right children."""
        n = NodeLabel(5)
        assert n.left() == NodeLabel(10)
        assert n.right() == NodeLabel(11)
        assert n.children() == frozenset({NodeLabel(10), NodeLabel(11)})

    def test_parity(self):
        """Test left/right detection."""
        assert NodeLabel(10).is_left()
        assert not NodeLabel(10).is_right()
        assert NodeLabel(11).is_right()
        assert not NodeLabel(11).is_left()

    def test_depth(self):
        """Test depth is bit length minus one."""
        assert NodeLabel(2).depth() == 1
        assert NodeLabel(3).depth() == 1
        assert NodeLabel(4).depth() == 2
        assert NodeLabel(7).depth() == 2
        assert NodeLabel(8).depth() == 3

    def test_deep_label(self):
        """Test labels beyond machine word size."""
        n = ROOT_LABEL
        for _ in range(200):
            n = n.right()
        assert n.depth() == 200
        assert n.ancestor(200) == ROOT_LABEL
        assert is_ancestor_of(ROOT_LABEL, n)

    def test_ancestor(self):
        """Test ancestors by level."""
        n = NodeLabel(11)  # 0b1011
        assert n.ancestor(0) == n
        assert n.ancestor(1) == NodeLabel(5)
        assert n.ancestor(2) == NodeLabel(2)
        assert n.ancestor(3) == ROOT_LABEL

    def test_ancestor_past_root(self):
        """Test that climbing past the root produces no valid label."""
        with pytest.raises(ValueError):
            NodeLabel(5).ancestor(3)

    def test_parent_and_sibling(self):
        """Test parent and sibling."""
        assert NodeLabel(10).parent() == NodeLabel(5)
        assert NodeLabel(10).sibling() == NodeLabel(11)
        assert NodeLabel(11).sibling() == NodeLabel(10)

    def test_ancestors(self):
        """Test ancestors run nearest first up to the root."""
        assert list(NodeLabel(11).ancestors()) == [
            NodeLabel(5), NodeLabel(2), NodeLabel(1)
        ]

    def test_ancestors_lazy(self):
        """Test ancestors can be consumed partially."""
        n = NodeLabel(2 ** 64)
        assert list(itertools.islice(n.ancestors(), 2)) == [
            NodeLabel(2 ** 63), NodeLabel(2 ** 62)
        ]

    def test_child_parent_round_trip(self):
        """Test child then parent returns the node."""
        for n in LABELS:
            assert n.left().parent() == n
            assert n.right().parent() == n

    def test_sibling_involution(self):
        """Test sibling of sibling returns the node."""
        for n in LABELS[1:]:
            assert n.sibling().sibling() == n
            assert n.sibling().parent() == n.parent()
            assert n.sibling() != n

    def test_depth_increments(self):
        """Test depth is one more than the parent's."""
        for n in LABELS[1:]:
            assert n.depth() == n.parent().depth() + 1


class TestAncestry:
    """Tests for ancestor/descendant relations."""

    def test_ancestor_relation(self):
        """Test a known ancestor pair."""
        assert is_ancestor_of(NodeLabel(2), NodeLabel(11))
        assert not is_ancestor_of(NodeLabel(11), NodeLabel(2))
        assert is_descendant_of(NodeLabel(11), NodeLabel(2))
        assert not is_descendant_of(NodeLabel(2), NodeLabel(11))

    def test_not_ancestor(self):
        """Test nodes in different subtrees are unrelated."""
        assert not is_ancestor_of(NodeLabel(3), NodeLabel(11))
        assert not is_ancestor_of(NodeLabel(2), NodeLabel(3))
        assert not is_ancestor_of(NodeLabel(4), NodeLabel(12))

    def test_not_own_ancestor(self):
        """Test the relation is strict."""
        for n in LABELS:
            assert not is_ancestor_of(n, n)
            assert not is_descendant_of(n, n)

    def test_matches_ancestors(self):
        """Test relation agrees with the ancestors sequence."""
        for b in LABELS:
            ancestors = set(b.ancestors())
            for a in LABELS:
                assert is_ancestor_of(a, b) == (a in ancestors)

    def test_antisymmetric(self):
        """Test an ancestor is never also a descendant."""
        for b in LABELS:
            for a in b.ancestors():
                assert is_ancestor_of(a, b)
                assert not is_ancestor_of(b, a)
