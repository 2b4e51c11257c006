"""Vertex handed to the triangulation engine."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class Vertex:
    """A sample point with an integer identifier.

    Attributes:
        x, y, z: Coordinates. For LAS sources z is the elevation and x/y
            may have been projected from geographic coordinates.
        index: Identifier assigned by the reader (the LAS record index,
            or a running counter for constraint vertices).
        classification: LAS classification code, None for other sources.
    """

    x: float
    y: float
    z: float
    index: int = 0
    classification: int | None = None

    def distance_sq(self, other: Vertex) -> float:
        """Squared planar distance to another vertex."""
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def distance(self, other: Vertex) -> float:
        return math.sqrt(self.distance_sq(other))
