"""Crop filter: keep records inside a spatial bounding box.

Uses PDAL-style bounds syntax:
    "([xmin, xmax], [ymin, ymax])"                   2D crop
    "([xmin, xmax], [ymin, ymax], [zmin, zmax])"     3D crop
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, Any

from tinfeed.core.bounds import Bounds
from tinfeed.filters.base import RecordFilter
from tinfeed.filters.registry import filter_registry

if TYPE_CHECKING:
    from tinfeed.io.las import LasPoint

# Parse bounds like "([xmin, xmax], [ymin, ymax])" or with 3 pairs
_BRACKET_PAIR = re.compile(r"\[\s*([^,\]]+)\s*,\s*([^,\]]+)\s*\]")


def _parse_bounds(bounds_str: str) -> list[tuple[float, float]]:
    """Parse a PDAL-style bounds string into a list of (min, max) pairs."""
    pairs = _BRACKET_PAIR.findall(bounds_str)
    if len(pairs) < 2:
        raise ValueError(
            f"Invalid bounds: '{bounds_str}'. "
            f"Expected: '([xmin, xmax], [ymin, ymax])' or "
            f"'([xmin, xmax], [ymin, ymax], [zmin, zmax])'"
        )
    return [(float(lo), float(hi)) for lo, hi in pairs]


class CropFilter(RecordFilter):
    """Keep records whose coordinates lie inside a box.

    Coordinates are compared in the file's own coordinate system, before
    any geographic projection.

    Options:
        bounds: str (PDAL-style bounds string) or a Bounds instance.

    Alternative options (if bounds not provided):
        minx, maxx, miny, maxy: float, 2D crop boundaries.
        minz, maxz: float, optional Z boundaries for 3D crop.
    """

    def __init__(self, **options: Any) -> None:
        super().__init__(**options)
        bounds = self.options.get("bounds")
        if isinstance(bounds, Bounds):
            self._box = bounds
        elif isinstance(bounds, str):
            pairs = _parse_bounds(bounds)
            zmin, zmax = pairs[2] if len(pairs) > 2 else (-math.inf, math.inf)
            self._box = Bounds(
                pairs[0][0], pairs[1][0], zmin, pairs[0][1], pairs[1][1], zmax
            )
        elif "minx" in self.options:
            self._box = Bounds(
                minx=float(self.options["minx"]),
                miny=float(self.options["miny"]),
                minz=float(self.options.get("minz", -math.inf)),
                maxx=float(self.options["maxx"]),
                maxy=float(self.options["maxy"]),
                maxz=float(self.options.get("maxz", math.inf)),
            )
        else:
            raise ValueError(
                "CropFilter requires 'bounds' or explicit minx/maxx/miny/maxy"
            )

    @property
    def bounds(self) -> Bounds:
        return self._box

    def accept(self, point: LasPoint) -> bool:
        return self._box.contains_point(point.x, point.y, point.z)

    @classmethod
    def type_name(cls) -> str:
        return "filters.crop"


filter_registry.register(CropFilter)
