"""
DuckDB-backed point source for CSV and Parquet point clouds.

This module implements a point source that loads a point file into an
in-memory DuckDB database. Bounding boxes and counts are computed as SQL
aggregates, which DuckDB evaluates in parallel; points are streamed to the
Python side in batches.
"""

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

import duckdb

from .rectangle import Rectangle
from .source import PointSource


logger = logging.getLogger(__name__)

NUMERIC_TYPES = {
    "TINYINT", "SMALLINT", "INTEGER", "BIGINT", "HUGEINT",
    "UTINYINT", "USMALLINT", "UINTEGER", "UBIGINT", "UHUGEINT",
    "FLOAT", "REAL", "DOUBLE",
}

READERS = {
    ".csv": "read_csv_auto",
    ".tsv": "read_csv_auto",
    ".parquet": "read_parquet",
}


def _quote(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def _literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _is_numeric(column_type: str) -> bool:
    return column_type in NUMERIC_TYPES or column_type.startswith("DECIMAL")


class DuckDBPointSource(PointSource):
    """
    Point source implementation using DuckDB.

    Each selected column is one axis. Rows with a NULL in any selected
    column are ignored.
    """

    def __init__(
        self,
        path: Path,
        columns: Optional[Sequence[str]] = None,
        batch_size: int = 10000,
    ):
        """
        Initialize the DuckDB point source.

        Args:
            path: Path to a .csv, .tsv or .parquet file
            columns: Names of the columns to use as axes, in axis order.
                Defaults to all numeric columns.
            batch_size: Rows fetched per round trip when streaming points
        """
        path = Path(path)
        reader = READERS.get(path.suffix.lower())
        if reader is None:
            raise ValueError(f"Unsupported point file type: {path.suffix}")
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self.path = path
        self.batch_size = batch_size

        # Initialize DuckDB connection
        self._con = duckdb.connect(":memory:")
        try:
            self._con.execute(f"""
                CREATE TABLE points AS
                SELECT * FROM {reader}({_literal(path.as_posix())})
            """)
            self.columns: List[str] = self._resolve_columns(columns)
        except Exception:
            self.close()
            raise
        logger.debug("Loaded %s with axes %s", path, self.columns)

    def _resolve_columns(self, columns: Optional[Sequence[str]]) -> List[str]:
        """Check requested columns exist and are numeric, or pick all numeric columns."""
        described = self._con.execute("DESCRIBE points").fetchall()
        types = {row[0]: row[1] for row in described}

        if columns:
            missing = [c for c in columns if c not in types]
            if missing:
                raise ValueError(f"Columns not found in {self.path}: {', '.join(missing)}")
            non_numeric = [c for c in columns if not _is_numeric(types[c])]
            if non_numeric:
                raise ValueError(
                    f"Columns are not numeric in {self.path}: {', '.join(non_numeric)}"
                )
            return list(columns)

        numeric = [row[0] for row in described if _is_numeric(row[1])]
        if not numeric:
            raise ValueError(f"No numeric columns in {self.path}")
        return numeric

    @property
    def dim(self) -> int:
        return len(self.columns)

    def _select(self) -> str:
        return ", ".join(f"CAST({_quote(c)} AS DOUBLE)" for c in self.columns)

    def _where(self) -> str:
        return " AND ".join(f"{_quote(c)} IS NOT NULL" for c in self.columns)

    def bounding_box(self) -> Rectangle:
        """
        Bounding box as one MIN/MAX aggregate over the table.

        Raises:
            ValueError: If there are no points
        """
        lows = ", ".join(f"MIN(CAST({_quote(c)} AS DOUBLE))" for c in self.columns)
        highs = ", ".join(f"MAX(CAST({_quote(c)} AS DOUBLE))" for c in self.columns)
        row = self._con.execute(
            f"SELECT {lows}, {highs} FROM points WHERE {self._where()}"
        ).fetchone()

        if row is None or row[0] is None:
            raise ValueError(f"Cannot compute the bounding box of no points ({self.path})")

        d = self.dim
        return Rectangle(row[:d], row[d:])

    def count(self) -> int:
        row = self._con.execute(
            f"SELECT COUNT(*) FROM points WHERE {self._where()}"
        ).fetchone()
        return int(row[0])

    def iter_batches(self, batch_size: int) -> Iterator[List[Tuple[float, ...]]]:
        """Stream points with one `fetchmany(batch_size)` per batch."""
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        cursor = self._con.cursor()
        try:
            cursor.execute(f"SELECT {self._select()} FROM points WHERE {self._where()}")
            while True:
                rows = cursor.fetchmany(batch_size)
                if not rows:
                    break
                yield [tuple(row) for row in rows]
        finally:
            cursor.close()

    def iter_points(self) -> Iterator[Tuple[float, ...]]:
        """Stream points in batches of `batch_size` rows."""
        for batch in self.iter_batches(self.batch_size):
            yield from batch

    def close(self) -> None:
        """Close the database connection."""
        if self._con:
            self._con.close()
            self._con = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def create_source_from_file(
    path: Path,
    columns: Optional[Sequence[str]] = None,
    batch_size: int = 10000,
) -> DuckDBPointSource:
    """
    Convenience function to create a point source from a file.

    Args:
        path: Point file (.csv, .tsv or .parquet)
        columns: Axis columns, or None for all numeric columns
        batch_size: Rows per fetch when streaming

    Returns:
        Configured DuckDBPointSource instance
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Could not find point file {path}")
    return DuckDBPointSource(path, columns, batch_size)
