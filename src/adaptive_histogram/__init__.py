"""
adaptive-histogram: histograms on adaptive binary spatial partitions.

This package represents piecewise constant functions over a bounding box
as sparse leaf-labelled trees layered over the infinite binary tree, whose
nodes are named by integers. Histograms are the piecewise constant
functions holding point counts.
"""

__version__ = "0.1.0"

from .rectangle import Rectangle, hull, point_box, bounding_box
from .labels import NodeLabel, ROOT_LABEL, is_ancestor_of, is_descendant_of
from .truncated import TruncatedTree, root_tree
from .pcfunction import PCFunction, constant_pcfunction, descend_spatial_tree
from .histogram import Histogram, density_formula
from .source import PointSource, InMemoryPointSource, FunctionPointSource, cell_counts
from .builder import HistogramBuilder, BuilderConfig, BuilderStats, build_histogram
from .duckdb_source import DuckDBPointSource, create_source_from_file

__all__ = [
    "Rectangle",
    "hull",
    "point_box",
    "bounding_box",
    "NodeLabel",
    "ROOT_LABEL",
    "is_ancestor_of",
    "is_descendant_of",
    "TruncatedTree",
    "root_tree",
    "PCFunction",
    "constant_pcfunction",
    "descend_spatial_tree",
    "Histogram",
    "density_formula",
    "PointSource",
    "InMemoryPointSource",
    "FunctionPointSource",
    "cell_counts",
    "HistogramBuilder",
    "BuilderConfig",
    "BuilderStats",
    "build_histogram",
    "DuckDBPointSource",
    "create_source_from_file",
]
