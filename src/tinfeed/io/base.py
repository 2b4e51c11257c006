"""Base classes for vertex and constraint readers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterator

if TYPE_CHECKING:
    from tinfeed.core.constraint import Constraint
    from tinfeed.core.vertex import Vertex


class VertexReader(ABC):
    """Base class for readers producing vertices for triangulation."""

    @abstractmethod
    def iter_vertices(self, path: str, **options: Any) -> Iterator[Vertex]:
        """Yield vertices from a file one at a time.

        Args:
            path: File path to read.
            **options: Format-specific options.

        Yields:
            Vertex objects in file order.
        """

    def read(self, path: str, **options: Any) -> list[Vertex]:
        """Read all vertices from a file.

        Args:
            path: File path to read.
            **options: Format-specific options.

        Returns:
            List of vertices in file order.
        """
        return list(self.iter_vertices(path, **options))

    @classmethod
    @abstractmethod
    def extensions(cls) -> list[str]:
        """File extensions this reader handles (e.g., ['.las', '.laz'])."""

    @classmethod
    @abstractmethod
    def type_name(cls) -> str:
        """Registry type identifier (e.g., 'readers.las')."""


class ConstraintReader(ABC):
    """Base class for readers producing polygon and linear constraints."""

    @abstractmethod
    def read(self, path: str, **options: Any) -> list[Constraint]:
        """Read all constraints from a file.

        Args:
            path: File path to read.
            **options: Format-specific options.

        Returns:
            Constraints in file order.
        """

    @classmethod
    @abstractmethod
    def extensions(cls) -> list[str]:
        """File extensions this reader handles."""

    @classmethod
    @abstractmethod
    def type_name(cls) -> str:
        """Registry type identifier (e.g., 'readers.shapefile')."""
