"""Source file metadata container."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tinfeed.core.bounds import Bounds


@dataclass
class Metadata:
    """Descriptive metadata for a vertex source.

    Attributes:
        source_file: File path the data was read from.
        source_format: File format identifier ("las", "shp", "csv").
        record_count: Number of records the file declares.
        bounds: Declared extent of the data, if the format carries one.
        creation_date: Creation date declared by the file, if any.
        software: Generating software declared by the file, if any.
        system_identifier: LAS system identifier, if applicable.
        point_format_id: LAS point data format (0-10), if applicable.
        file_version: LAS file version (e.g. "1.4"), if applicable.
        linear_units: Label of the horizontal units ("meters", "feet").
        geographic: True when coordinates are longitude and latitude.
        crs_wkt: Coordinate reference system as WKT text, if known.
        extra: Free-form metadata dictionary.
    """

    source_file: str | None = None
    source_format: str | None = None
    record_count: int = 0
    bounds: Bounds | None = None
    creation_date: datetime | None = None
    software: str | None = None
    system_identifier: str | None = None
    point_format_id: int | None = None
    file_version: str | None = None
    linear_units: str = "unknown"
    geographic: bool = False
    crs_wkt: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def summary(self) -> dict[str, Any]:
        """Flatten to a dictionary of plain values, skipping unset entries."""
        out: dict[str, Any] = {
            "source_format": self.source_format,
            "record_count": self.record_count,
            "linear_units": self.linear_units,
            "geographic": self.geographic,
        }
        for key in ("source_file", "software", "system_identifier",
                    "point_format_id", "file_version", "crs_wkt"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        if self.creation_date is not None:
            out["creation_date"] = self.creation_date.date().isoformat()
        if self.bounds is not None:
            b = self.bounds
            out["bounds"] = [b.minx, b.miny, b.minz, b.maxx, b.maxy, b.maxz]
        out.update(self.extra)
        return out
