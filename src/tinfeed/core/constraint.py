"""Polygon and linear constraints for a constrained triangulation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator

import numpy as np

from tinfeed.core.bounds import Bounds
from tinfeed.core.vertex import Vertex

# Squared planar distance below which two vertices are the same point
COINCIDENT_DISTANCE_SQ = 1.0e-32


class Constraint(ABC):
    """An ordered chain of vertices the triangulation must honor.

    Vertices are collected with `add` and the geometry is finalized with
    `complete`, after which derived values such as `length` are valid.

    Args:
        vertices: Initial vertices, in order.
        application_data: Opaque tag carried to the triangulation, e.g. a
            record number or a land/water flag.
    """

    def __init__(
        self,
        vertices: Iterable[Vertex] | None = None,
        application_data: Any = None,
    ) -> None:
        self._vertices: list[Vertex] = []
        self.application_data = application_data
        self._length = 0.0
        self._complete = False
        for v in vertices or ():
            self.add(v)

    def add(self, vertex: Vertex) -> None:
        """Append a vertex; one repeating the previous x and y is ignored."""
        if self._complete:
            raise ValueError("Cannot add vertices to a completed constraint")
        if self._vertices:
            last = self._vertices[-1]
            if last.x == vertex.x and last.y == vertex.y:
                return
        self._vertices.append(vertex)

    @property
    def vertices(self) -> list[Vertex]:
        return list(self._vertices)

    @property
    def is_complete(self) -> bool:
        return self._complete

    @property
    def length(self) -> float:
        """Total planar length of the chain (closed for polygons)."""
        return self._length

    @property
    @abstractmethod
    def is_polygon(self) -> bool:
        """True for closed polygon constraints."""

    @abstractmethod
    def complete(self) -> None:
        """Finalize the geometry. Calling it again has no effect."""

    def to_array(self) -> np.ndarray:
        """(n, 3) array of the vertex coordinates."""
        return np.array([(v.x, v.y, v.z) for v in self._vertices], dtype=np.float64).reshape(-1, 3)

    @property
    def bounds(self) -> Bounds | None:
        return Bounds.from_vertices(self._vertices)

    def __len__(self) -> int:
        return len(self._vertices)

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self._vertices)

    def _chain_length(self, closed: bool) -> float:
        xy = self.to_array()[:, :2]
        if len(xy) < 2:
            return 0.0
        if closed:
            xy = np.vstack([xy, xy[:1]])
        return float(np.sum(np.hypot(np.diff(xy[:, 0]), np.diff(xy[:, 1]))))


class LinearConstraint(Constraint):
    """An open polyline, e.g. a breakline or a road edge."""

    @property
    def is_polygon(self) -> bool:
        return False

    def complete(self) -> None:
        if self._complete:
            return
        if len(self._vertices) < 2:
            raise ValueError("Linear constraint requires at least 2 vertices")
        self._length = self._chain_length(closed=False)
        self._complete = True

    def __repr__(self) -> str:
        return (
            f"LinearConstraint(vertices={len(self._vertices)}, "
            f"length={self._length:.3f}, data={self.application_data!r})"
        )


class PolygonConstraint(Constraint):
    """A closed polygon.

    The closing vertex is implicit: if the last vertex repeats the first
    it is dropped on completion. The signed area is positive for a
    counter-clockwise ring (an outer boundary) and negative for a
    clockwise ring (a hole).
    """

    def __init__(
        self,
        vertices: Iterable[Vertex] | None = None,
        application_data: Any = None,
    ) -> None:
        super().__init__(vertices, application_data)
        self._area = 0.0

    @property
    def is_polygon(self) -> bool:
        return True

    @property
    def area(self) -> float:
        """Signed area; valid after `complete`."""
        return self._area

    def complete(self) -> None:
        if self._complete:
            return
        vs = self._vertices
        if is_closed(vs):
            vs.pop()
        if len(vs) < 3:
            raise ValueError("Polygon constraint requires at least 3 distinct vertices")

        xy = self.to_array()[:, :2]
        # center on the mean to limit cancellation in the cross products
        xy = xy - xy.mean(axis=0)
        x, y = xy[:, 0], xy[:, 1]
        x1, y1 = np.roll(x, -1), np.roll(y, -1)
        self._area = float(np.sum(x * y1 - x1 * y)) / 2.0
        self._length = self._chain_length(closed=True)
        self._complete = True

    def __repr__(self) -> str:
        return (
            f"PolygonConstraint(vertices={len(self._vertices)}, "
            f"area={self._area:.3f}, data={self.application_data!r})"
        )


def is_closed(vertices: list[Vertex]) -> bool:
    """Whether the first and last vertex coincide."""
    return len(vertices) > 1 and vertices[0].distance_sq(vertices[-1]) < COINCIDENT_DISTANCE_SQ

