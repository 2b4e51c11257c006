"""I/O registry: format auto-detection and convenience functions."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from tinfeed.core.constraint import Constraint
from tinfeed.core.vertex import Vertex
from tinfeed.io.base import ConstraintReader, VertexReader


class IORegistry:
    """Registry for vertex and constraint readers, keyed by extension."""

    def __init__(self) -> None:
        self._vertex_readers: dict[str, type[VertexReader]] = {}  # extension -> class
        self._constraint_readers: dict[str, type[ConstraintReader]] = {}
        self._vertex_types: dict[str, type[VertexReader]] = {}  # type_name -> class
        self._constraint_types: dict[str, type[ConstraintReader]] = {}

    def register_vertex_reader(self, cls: type[VertexReader]) -> None:
        """Register a vertex reader class for its extensions."""
        for ext in cls.extensions():
            self._vertex_readers[ext.lower()] = cls
        self._vertex_types[cls.type_name()] = cls

    def register_constraint_reader(self, cls: type[ConstraintReader]) -> None:
        """Register a constraint reader class for its extensions."""
        for ext in cls.extensions():
            self._constraint_readers[ext.lower()] = cls
        self._constraint_types[cls.type_name()] = cls

    def get_vertex_reader(self, path: str) -> VertexReader:
        """Get a vertex reader instance for the given file path.

        Raises:
            ValueError: No reader handles the file extension.
        """
        ext = Path(path).suffix.lower()
        if ext not in self._vertex_readers:
            raise ValueError(
                f"No vertex reader for extension '{ext}'. "
                f"Supported: {list(self._vertex_readers.keys())}"
            )
        return self._vertex_readers[ext]()

    def get_constraint_reader(self, path: str) -> ConstraintReader | None:
        """Get a constraint reader for the given file path, or None."""
        cls = self._constraint_readers.get(Path(path).suffix.lower())
        return cls() if cls is not None else None

    def get_vertex_reader_by_type(self, type_name: str) -> VertexReader:
        """Get a vertex reader by its type name (e.g., 'readers.las')."""
        if type_name not in self._vertex_types:
            raise ValueError(
                f"Unknown reader type '{type_name}'. "
                f"Available: {list(self._vertex_types.keys())}"
            )
        return self._vertex_types[type_name]()

    def get_constraint_reader_by_type(self, type_name: str) -> ConstraintReader:
        """Get a constraint reader by its type name."""
        if type_name not in self._constraint_types:
            raise ValueError(
                f"Unknown reader type '{type_name}'. "
                f"Available: {list(self._constraint_types.keys())}"
            )
        return self._constraint_types[type_name]()


# Global registry instance
io_registry = IORegistry()


def _ensure_registered() -> None:
    """Register built-in readers (lazy, on first use)."""
    if io_registry._vertex_readers:
        return

    from tinfeed.io.constraints import ShapefileConstraintReader, TextConstraintReader
    from tinfeed.io.csv import CsvVertexReader
    from tinfeed.io.las import LasVertexReader
    from tinfeed.io.shapefile import ShapefileVertexReader

    io_registry.register_vertex_reader(LasVertexReader)
    io_registry.register_vertex_reader(CsvVertexReader)
    io_registry.register_vertex_reader(ShapefileVertexReader)
    io_registry.register_constraint_reader(ShapefileConstraintReader)
    io_registry.register_constraint_reader(TextConstraintReader)


def read_vertices(path: str, **options: Any) -> list[Vertex]:
    """Read the vertices of a file (auto-detects format).

    Args:
        path: File path to read.
        **options: Format-specific options.

    Returns:
        Vertices in file order.
    """
    _ensure_registered()
    reader = io_registry.get_vertex_reader(str(path))
    return reader.read(str(path), **options)


def read_constraints(path: str, **options: Any) -> list[Constraint]:
    """Read the constraints of a file (auto-detects format).

    Raises:
        ValueError: No constraint reader handles the file extension.
    """
    _ensure_registered()
    reader = io_registry.get_constraint_reader(str(path))
    if reader is None:
        raise ValueError(f"No constraint reader for '{path}'")
    return reader.read(str(path), **options)
