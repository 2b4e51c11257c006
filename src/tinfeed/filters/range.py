"""Range filter: keep records whose attributes fall within value ranges.

Uses PDAL-style range syntax:
    "Classification[2:2]"           exact match
    "Classification[2:5]"           inclusive range
    "Z[100:]"                       minimum only
    "Z[:500]"                       maximum only
    "Classification[2:2],Z[100:]"   several conditions, all must hold
    "Classification![7:7]"          negation (exclude)
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from tinfeed.filters.base import RecordFilter
from tinfeed.filters.registry import filter_registry

if TYPE_CHECKING:
    from tinfeed.io.las import LasPoint

# Pattern: DimName[min:max] or DimName![min:max]
_RANGE_PATTERN = re.compile(
    r"^(?P<dim>[A-Za-z_]\w*)"
    r"(?P<negate>!)?"
    r"\[(?P<min>[^:\]]*):(?P<max>[^:\]]*)\]$"
)

# Dimension name -> LasPoint attribute
DIMENSIONS: dict[str, str] = {
    "X": "x",
    "Y": "y",
    "Z": "z",
    "Intensity": "intensity",
    "ReturnNumber": "return_number",
    "NumberOfReturns": "number_of_returns",
    "ScanDirectionFlag": "scan_direction_flag",
    "Classification": "classification",
    "ScannerChannel": "scanner_channel",
    "GpsTime": "gps_time",
}


def _parse_range_expr(expr: str) -> tuple[str, bool, float | None, float | None]:
    """Parse a single range expression like 'Classification[2:2]'.

    Returns:
        (attribute_name, negate, min_value, max_value)
    """
    expr = expr.strip()
    m = _RANGE_PATTERN.match(expr)
    if not m:
        raise ValueError(
            f"Invalid range expression: '{expr}'. "
            f"Expected format: DimName[min:max] (e.g., 'Classification[2:2]')"
        )

    dim = m.group("dim")
    if dim not in DIMENSIONS:
        raise KeyError(
            f"Dimension '{dim}' is not a LAS record attribute. "
            f"Available: {list(DIMENSIONS)}"
        )
    negate = m.group("negate") == "!"
    min_str = m.group("min").strip()
    max_str = m.group("max").strip()

    min_val = float(min_str) if min_str else None
    max_val = float(max_str) if max_str else None

    return DIMENSIONS[dim], negate, min_val, max_val


class RangeFilter(RecordFilter):
    """Keep records whose attributes satisfy every range expression.

    A record lacking the attribute (GPS time in formats 0 and 2) fails
    any non-negated condition on it.

    Options:
        limits: str, comma-separated range expressions.
    """

    def __init__(self, **options: Any) -> None:
        super().__init__(**options)
        if "limits" not in self.options:
            raise ValueError("RangeFilter requires 'limits' option")
        self._conditions = [
            _parse_range_expr(e)
            for e in self.options["limits"].split(",")
            if e.strip()
        ]

    def accept(self, point: LasPoint) -> bool:
        for attr, negate, min_val, max_val in self._conditions:
            value = getattr(point, attr)
            inside = value is not None
            if inside and min_val is not None:
                inside = value >= min_val
            if inside and max_val is not None:
                inside = value <= max_val
            if inside == negate:
                return False
        return True

    @classmethod
    def type_name(cls) -> str:
        return "filters.range"


filter_registry.register(RangeFilter)
