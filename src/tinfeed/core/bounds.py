"""Axis-aligned 3D bounding box."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

import numpy as np

if TYPE_CHECKING:
    from tinfeed.core.vertex import Vertex


@dataclass(frozen=True)
class Bounds:
    """3D axis-aligned bounding box.

    Attributes:
        minx, miny, minz: Minimum corner coordinates.
        maxx, maxy, maxz: Maximum corner coordinates.
    """

    minx: float
    miny: float
    minz: float
    maxx: float
    maxy: float
    maxz: float

    @classmethod
    def from_arrays(cls, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> Bounds:
        """Compute bounds from X, Y, Z arrays."""
        return cls(
            minx=float(np.min(x)),
            miny=float(np.min(y)),
            minz=float(np.min(z)),
            maxx=float(np.max(x)),
            maxy=float(np.max(y)),
            maxz=float(np.max(z)),
        )

    @classmethod
    def from_xyz(cls, xyz: np.ndarray) -> Bounds:
        """Compute bounds from an (n, 3) coordinate array."""
        return cls.from_arrays(xyz[:, 0], xyz[:, 1], xyz[:, 2])

    @classmethod
    def from_vertices(cls, vertices: Iterable[Vertex]) -> Bounds | None:
        """Compute bounds of a vertex collection, None when it is empty."""
        coords = np.array([(v.x, v.y, v.z) for v in vertices], dtype=np.float64)
        if len(coords) == 0:
            return None
        return cls.from_xyz(coords)

    def contains_point(self, x: float, y: float, z: float) -> bool:
        """Check if a point is inside the bounding box."""
        return (
            self.minx <= x <= self.maxx
            and self.miny <= y <= self.maxy
            and self.minz <= z <= self.maxz
        )

    @property
    def center_x(self) -> float:
        return (self.minx + self.maxx) / 2

    @property
    def center_y(self) -> float:
        return (self.miny + self.maxy) / 2

    @property
    def width(self) -> float:
        return self.maxx - self.minx

    @property
    def height(self) -> float:
        return self.maxy - self.miny

    @property
    def depth(self) -> float:
        return self.maxz - self.minz

    def __repr__(self) -> str:
        return (
            f"Bounds(x=[{self.minx:.2f}, {self.maxx:.2f}], "
            f"y=[{self.miny:.2f}, {self.maxy:.2f}], "
            f"z=[{self.minz:.2f}, {self.maxz:.2f}])"
        )
