"""CSV/text reader for delimited x,y,z vertex data."""

from __future__ import annotations

import io as _io
import logging
from typing import Any, Iterator

import numpy as np

from tinfeed.core.bounds import Bounds
from tinfeed.core.metadata import Metadata
from tinfeed.core.vertex import Vertex
from tinfeed.errors import FormatError
from tinfeed.io.base import VertexReader

logger = logging.getLogger(__name__)


class CsvVertexReader(VertexReader):
    """Read CSV/TXT/XYZ vertex files.

    Options:
        delimiter: str, field delimiter (default: auto-detect from ',', ';', '\\t', ' ').
        header: str, comma-separated column names if file has no header row.
            E.g., "X,Y,Z,Intensity". If not given and the first row is not
            numeric, the first row is used as header.
        skip: int, number of lines to skip before data (default: 0).
        transform: object with ``forward(x, y) -> (x, y)`` applied to every
            vertex.

    Columns named x, y and z (any case) supply the coordinates; without
    names the first three columns are used.
    """

    def __init__(self) -> None:
        self.bounds: Bounds | None = None
        self.metadata: Metadata | None = None

    def iter_vertices(self, path: str, **options: Any) -> Iterator[Vertex]:
        data = self._load(path, **options)
        transform = options.get("transform")

        xyz = data
        if transform is not None and len(xyz):
            xyz = xyz.copy()
            for i in range(len(xyz)):
                try:
                    xyz[i, 0], xyz[i, 1] = transform.forward(xyz[i, 0], xyz[i, 1])
                except ValueError as e:
                    raise FormatError(
                        f"Unable to transform coordinates: {e}", path=str(path), record=i
                    ) from e

        self.bounds = Bounds.from_xyz(xyz) if len(xyz) else None
        self.metadata = Metadata(
            source_file=str(path), source_format="csv",
            record_count=len(xyz), bounds=self.bounds,
        )
        logger.info("Read %d vertices from %s", len(xyz), path)
        for i, (x, y, z) in enumerate(xyz):
            yield Vertex(float(x), float(y), float(z), index=i)

    def _load(self, path: str, **options: Any) -> np.ndarray:
        """Parse the file into an (n, 3) x,y,z array."""
        delimiter = options.get("delimiter")
        header_str = options.get("header")
        skip = int(options.get("skip", 0))

        with open(path, "r") as f:
            # Skip leading lines
            for _ in range(skip):
                f.readline()

            columns: list[str] | None = None
            if header_str:
                columns = [c.strip() for c in header_str.split(",")]
                remaining = f.read()
            else:
                first_line = f.readline().strip()
                if delimiter is None and first_line:
                    delimiter = self._detect_delimiter(first_line)
                if first_line and not _is_numeric_row(first_line, delimiter):
                    fields = first_line.split() if delimiter == " " else first_line.split(delimiter)
                    columns = [c.strip() for c in fields]
                    remaining = f.read()
                else:
                    remaining = first_line + "\n" + f.read()

        if delimiter is None and remaining.strip():
            delimiter = self._detect_delimiter(remaining.strip().split("\n", 1)[0])

        picks = self._column_indices(columns, path)
        if not remaining.strip():
            return np.zeros((0, 3), dtype=np.float64)

        # Bulk parse with np.loadtxt
        try:
            data = np.loadtxt(
                _io.StringIO(remaining),
                delimiter=None if delimiter == " " else delimiter,
                dtype=np.float64,
                ndmin=2,
            )
        except ValueError as e:
            raise FormatError(f"Invalid numeric data: {e}", path=str(path)) from e
        if data.shape[1] <= max(picks):
            raise FormatError(
                f"Expected at least {max(picks) + 1} columns, found {data.shape[1]}",
                path=str(path),
            )
        return np.ascontiguousarray(data[:, picks])

    def _column_indices(self, columns: list[str] | None, path: str) -> list[int]:
        if columns is None:
            return [0, 1, 2]
        lowered = [c.lower() for c in columns]
        picks = []
        for name in ("x", "y", "z"):
            if name not in lowered:
                raise FormatError(f"No '{name}' column in header {columns}", path=str(path))
            picks.append(lowered.index(name))
        return picks

    def _detect_delimiter(self, line: str) -> str:
        """Auto-detect the delimiter from a sample line."""
        for delim in [",", ";", "\t"]:
            if delim in line:
                return delim
        return " "

    @classmethod
    def extensions(cls) -> list[str]:
        return [".csv", ".txt", ".xyz"]

    @classmethod
    def type_name(cls) -> str:
        return "readers.csv"


def _is_numeric_row(line: str, delimiter: str | None) -> bool:
    fields = line.split(delimiter) if delimiter != " " else line.split()
    try:
        for s in fields:
            float(s)
    except ValueError:
        return False
    return True
