"""Tests for point sources."""

import pytest
from adaptive_histogram.labels import NodeLabel, ROOT_LABEL
from adaptive_histogram.pcfunction import constant_pcfunction
from adaptive_histogram.rectangle import Rectangle
from adaptive_histogram.source import (
    InMemoryPointSource,
    FunctionPointSource,
    cell_counts,
)


POINTS = [(0, 0), (1, 2), (3, 1), (2, 2), (0.5, 1.5)]


class TestInMemoryPointSource:
    """Tests for InMemoryPointSource class."""

    def test_iter_points(self):
        """Test points are returned as float tuples."""
        source = InMemoryPointSource(POINTS)
        points = list(source.iter_points())
        assert points[1] == (1.0, 2.0)
        assert len(points) == 5

    def test_reiterable(self):
        """Test iter_points can be called repeatedly."""
        source = InMemoryPointSource(iter(POINTS))
        assert list(source.iter_points()) == list(source.iter_points())

    def test_count(self):
        """Test point count."""
        assert InMemoryPointSource(POINTS).count() == 5
        assert InMemoryPointSource([]).count() == 0

    def test_bounding_box(self):
        """Test bounding box over all points."""
        assert InMemoryPointSource(POINTS).bounding_box() == Rectangle([0, 0], [3, 2])

    def test_bounding_box_empty(self):
        """Test empty source raises an error."""
        with pytest.raises(ValueError):
            InMemoryPointSource([]).bounding_box()

    def test_count_cells(self):
        """Test counting points into cells."""
        source = InMemoryPointSource(POINTS)
        pcf = constant_pcfunction(source.bounding_box(), 0).split_cell(
            ROOT_LABEL, lambda _: (0, 0)
        )
        counts = source.count_cells(pcf)

        # Cut at x = 1.5
        assert counts[NodeLabel(2)] == 3
        assert counts[NodeLabel(3)] == 2
        assert sum(counts.values()) == 5

    def test_count_cells_omits_empty(self):
        """Test cells with no points are absent from the counter."""
        source = InMemoryPointSource([(0, 0), (0.1, 0.1)])
        pcf = constant_pcfunction(Rectangle([0, 0], [1, 1]), 0).split_cell(
            ROOT_LABEL, lambda _: (0, 0)
        )
        counts = source.count_cells(pcf)
        assert dict(counts) == {NodeLabel(2): 2}

    def test_iter_batches(self):
        """Test points are chunked into batches of at most batch_size."""
        source = InMemoryPointSource(POINTS)
        batches = list(source.iter_batches(2))
        assert [len(b) for b in batches] == [2, 2, 1]
        assert [p for b in batches for p in b] == list(source.iter_points())

    def test_iter_batches_invalid_size(self):
        """Test a batch size below one raises ValueError."""
        with pytest.raises(ValueError):
            list(InMemoryPointSource(POINTS).iter_batches(0))

    def test_count_cells_batch_size(self):
        """Test counts do not depend on the batch size."""
        source = InMemoryPointSource(POINTS)
        pcf = constant_pcfunction(source.bounding_box(), 0).split_cell(
            ROOT_LABEL, lambda _: (0, 0)
        )
        assert source.count_cells(pcf, batch_size=1) == source.count_cells(pcf)


class TestFunctionPointSource:
    """Tests for FunctionPointSource class."""

    def test_generator_factory(self):
        """Test a generator function used as point factory."""
        def points():
            for i in range(10):
                yield (i, i * i)

        source = FunctionPointSource(points)
        assert source.count() == 10
        assert source.bounding_box() == Rectangle([0, 0], [9, 81])
        # A second pass sees the same points
        assert source.count() == 10


class TestCellCounts:
    """Tests for cell_counts function."""

    def test_installs_counts(self):
        """Test counts become the cell values, with zero for missing cells."""
        pcf = constant_pcfunction(Rectangle([0], [1]), None).split_cell(
            ROOT_LABEL, lambda _: (None, None)
        )
        counted = cell_counts(pcf, {NodeLabel(3): 7})

        assert counted.value_at(NodeLabel(2)) == 0
        assert counted.value_at(NodeLabel(3)) == 7
        assert counted.apply((0.9,)) == (NodeLabel(3), Rectangle([0.5], [1]), 7)
