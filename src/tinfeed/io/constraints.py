"""Constraint readers for Shapefiles and delimited text, and the loader."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterator, Protocol

from tinfeed.core.constraint import (
    COINCIDENT_DISTANCE_SQ,
    Constraint,
    LinearConstraint,
    PolygonConstraint,
    is_closed,
)
from tinfeed.core.transform import GeographicRescale
from tinfeed.core.vertex import Vertex
from tinfeed.errors import FormatError
from tinfeed.io.base import ConstraintReader
from tinfeed.io.shapefile import ShapefileReader, ShapefileType

logger = logging.getLogger(__name__)

# Shape types that can be turned into constraints
CONSTRAINT_SHAPE_TYPES = (ShapefileType.POLYLINE_Z, ShapefileType.POLYGON_Z)


class PlanarTransform(Protocol):
    def forward(self, x: float, y: float) -> tuple[float, float]: ...


class ShapefileConstraintReader(ConstraintReader):
    """Read PolyLineZ and PolygonZ Shapefiles as constraints.

    Each part of each record becomes one constraint. Polygon records give
    PolygonConstraints with the ring reversed: Shapefile outer rings are
    clockwise, and reversing them yields a positive (outer) area. The
    constraint's application data is the record number unless a DBF
    field is named for it.

    Options:
        transform: object with ``forward(x, y) -> (x, y)`` applied to every
            vertex (GeographicRescale or SimpleGeographicTransform).
        z_field: str, numeric DBF field supplying z for every vertex of
            a record, replacing the Shapefile z values.
        app_data_field: str, DBF field whose value becomes the
            application data.
        first_vertex_index: int, id given to the first vertex (default 0).
    """

    def __init__(self) -> None:
        self.total_point_count = 0

    def read(self, path: str, **options: Any) -> list[Constraint]:
        transform: PlanarTransform | None = options.get("transform")
        z_field_name = _field_option(options.get("z_field"))
        app_field_name = _field_option(options.get("app_data_field"))
        vertex_index = int(options.get("first_vertex_index", 0))

        constraints: list[Constraint] = []
        with ShapefileReader(path) as shp:
            stype = shp.shape_type
            if stype not in CONSTRAINT_SHAPE_TYPES:
                raise FormatError(
                    f"Unsupported shape type {stype.name} for constraints", path=str(path)
                )

            dbf = None
            if z_field_name or app_field_name:
                dbf = shp.get_dbf_reader()
            try:
                z_field = app_field = None
                if z_field_name:
                    z_field = dbf.get_field_by_name(z_field_name)
                    if z_field is None or not z_field.is_numeric:
                        raise FormatError(
                            f"Field '{z_field_name}' for z is missing or not numeric",
                            path=dbf.path,
                        )
                if app_field_name:
                    app_field = dbf.get_field_by_name(app_field_name)
                    if app_field is None:
                        raise FormatError(
                            f"Field '{app_field_name}' for application data is missing",
                            path=dbf.path,
                        )

                for record in shp.records():
                    if record.n_points == 0:
                        continue
                    z_override = None
                    if z_field is not None:
                        z_override = dbf.read_double(record.record_number, z_field)
                    app_data: Any = record.record_number
                    if app_field is not None:
                        app_data = dbf.read_field(record.record_number, app_field)

                    self.total_point_count += record.n_points
                    for part in record.parts():
                        rows = part[::-1] if stype.is_polygon else part
                        con: Constraint = (
                            PolygonConstraint() if stype.is_polygon else LinearConstraint()
                        )
                        for x, y, z in rows:
                            x, y = float(x), float(y)
                            if transform is not None:
                                try:
                                    x, y = transform.forward(x, y)
                                except ValueError as e:
                                    raise FormatError(
                                        f"Unable to transform coordinates ({x}, {y}): {e}",
                                        path=str(path), record=record.record_number,
                                    ) from e
                            con.add(Vertex(
                                x, y, float(z) if z_override is None else z_override,
                                index=vertex_index,
                            ))
                            vertex_index += 1
                        con.application_data = app_data
                        try:
                            con.complete()
                        except ValueError as e:
                            raise FormatError(
                                str(e), path=str(path), record=record.record_number
                            ) from e
                        constraints.append(con)
            finally:
                if dbf is not None:
                    dbf.close()

        logger.info("Loaded %d constraints from %s", len(constraints), path)
        return constraints

    @classmethod
    def extensions(cls) -> list[str]:
        return [".shp"]

    @classmethod
    def type_name(cls) -> str:
        return "readers.constraints.shapefile"


def _field_option(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class TextConstraintReader(ConstraintReader):
    """Read constraints from comma-delimited text.

    Two layouts are recognized from the first non-blank line.

    Single constraint: every line is ``x,y,z``. The chain is a polygon
    when it has more than 3 vertices and the last repeats the first,
    otherwise it is linear.

    Multiple constraints: each constraint starts with a line holding its
    vertex count, optionally followed by ``polygon`` or ``linear``, then
    that many ``x,y,z`` lines. Without a keyword a constraint of more
    than 3 vertices is a polygon when its first two vertices coincide.

    Blank lines are skipped. Application data is the 0-based constraint
    number.

    Options:
        transform: object with ``forward(x, y) -> (x, y)`` applied to every
            vertex.
        first_vertex_index: int, id given to the first vertex (default 0).
    """

    def __init__(self) -> None:
        self.total_point_count = 0

    def read(self, path: str, **options: Any) -> list[Constraint]:
        self._path = str(path)
        self._transform: PlanarTransform | None = options.get("transform")
        self._vertex_index = int(options.get("first_vertex_index", 0))

        with open(path, "r", encoding="utf-8") as f:
            lines = _split_lines(f)
            first = next(lines, None)
            if first is None:
                raise FormatError("Empty constraint file", path=self._path)

            if len(first[1]) == 3:
                constraints = [self._read_single(first, lines)]
            else:
                constraints = self._read_multiple(first, lines)

        logger.info("Loaded %d constraints from %s", len(constraints), path)
        return constraints

    def _vertex(self, line_number: int, fields: list[str]) -> Vertex:
        if len(fields) != 3:
            raise FormatError(
                "Invalid entry where x,y,z coordinates expected",
                path=self._path, line=line_number,
            )
        try:
            x, y, z = (float(s) for s in fields)
        except ValueError as e:
            raise FormatError(
                "Invalid entry where x,y,z coordinates expected",
                path=self._path, line=line_number,
            ) from e
        if self._transform is not None:
            try:
                x, y = self._transform.forward(x, y)
            except ValueError as e:
                raise FormatError(
                    f"Unable to transform coordinates ({x}, {y}): {e}",
                    path=self._path, line=line_number,
                ) from e
        v = Vertex(x, y, z, index=self._vertex_index)
        self._vertex_index += 1
        self.total_point_count += 1
        return v

    def _read_single(
        self, first: tuple[int, list[str]], lines: Iterator[tuple[int, list[str]]]
    ) -> Constraint:
        vertices = [self._vertex(*first)]
        for line_number, fields in lines:
            vertices.append(self._vertex(line_number, fields))

        if len(vertices) > 3 and is_closed(vertices):
            con: Constraint = PolygonConstraint(vertices, application_data=0)
        else:
            con = LinearConstraint(vertices, application_data=0)
        try:
            con.complete()
        except ValueError as e:
            raise FormatError(str(e), path=self._path) from e
        return con

    def _read_multiple(
        self, first: tuple[int, list[str]], lines: Iterator[tuple[int, list[str]]]
    ) -> list[Constraint]:
        constraints: list[Constraint] = []
        header: tuple[int, list[str]] | None = first
        while header is not None:
            line_number, fields = header
            if len(fields) > 2:
                raise FormatError(
                    "Invalid entry for point count; a single count is expected",
                    path=self._path, line=line_number,
                )
            try:
                n_points = int(fields[0])
            except ValueError as e:
                raise FormatError(
                    f"Invalid entry for point count \"{fields[0]}\"",
                    path=self._path, line=line_number,
                ) from e
            if n_points < 1:
                raise FormatError(
                    f"Invalid point count {n_points}", path=self._path, line=line_number
                )
            keyword = fields[1].lower() if len(fields) > 1 else ""
            if keyword not in ("", "polygon", "linear"):
                logger.warning(
                    "%s line %d: ignoring unknown constraint type '%s'",
                    self._path, line_number, fields[1],
                )

            vertices = []
            for _ in range(n_points):
                entry = next(lines, None)
                if entry is None:
                    raise FormatError(
                        f"File ended before {n_points} coordinate lines were read",
                        path=self._path, line=line_number,
                    )
                vertices.append(self._vertex(*entry))

            if keyword == "polygon":
                if n_points < 3:
                    raise FormatError(
                        "Fewer than 3 points specified for polygon",
                        path=self._path, line=line_number,
                    )
                polygon = True
            elif keyword == "linear":
                polygon = False
            else:
                polygon = (
                    n_points > 3
                    and vertices[0].distance_sq(vertices[1]) < COINCIDENT_DISTANCE_SQ
                )

            con: Constraint
            if polygon:
                con = PolygonConstraint(vertices, application_data=len(constraints))
            else:
                con = LinearConstraint(vertices, application_data=len(constraints))
            try:
                con.complete()
            except ValueError as e:
                raise FormatError(str(e), path=self._path, line=line_number) from e
            constraints.append(con)
            header = next(lines, None)
        return constraints

    @classmethod
    def extensions(cls) -> list[str]:
        return [".txt", ".csv"]

    @classmethod
    def type_name(cls) -> str:
        return "readers.constraints.text"


def _split_lines(f) -> Iterator[tuple[int, list[str]]]:
    """Yield (1-based line number, comma-separated fields) for non-blank lines."""
    for line_number, line in enumerate(f, start=1):
        line = line.strip()
        if not line:
            continue
        yield line_number, [s.strip() for s in line.split(",")]


class ConstraintLoader:
    """Load polygon and linear constraints from a file.

    Dispatches on the file extension: ``.shp`` files are read with
    ShapefileConstraintReader, ``.txt`` and ``.csv`` files with
    TextConstraintReader.

    Args:
        rescale: Planar rescale applied to x/y of every vertex.
        dbf_field_for_z: DBF field supplying z for Shapefile records.
        dbf_field_for_app_data: DBF field supplying application data for
            Shapefile records.

    Examples:
        >>> loader = ConstraintLoader()
        >>> constraints = loader.read_constraints_file("lakes.shp")
    """

    def __init__(
        self,
        rescale: GeographicRescale | None = None,
        dbf_field_for_z: str | None = None,
        dbf_field_for_app_data: str | None = None,
    ) -> None:
        self.transform: PlanarTransform | None = rescale
        self.dbf_field_for_z = dbf_field_for_z
        self.dbf_field_for_app_data = dbf_field_for_app_data
        self._total_point_count = 0

    def set_geographic(
        self, scale_x: float, scale_y: float, offset_x: float, offset_y: float
    ) -> None:
        """Rescale coordinates as ``(raw - offset) * scale`` on load."""
        self.transform = GeographicRescale(scale_x, scale_y, offset_x, offset_y)

    def set_coordinate_transform(self, transform: PlanarTransform | None) -> None:
        """Use any object with ``forward(x, y)``, or None to disable."""
        self.transform = transform

    @property
    def total_point_count(self) -> int:
        """Vertices read by this loader across all files."""
        return self._total_point_count

    def read_constraints_file(self, path: str | Path) -> list[Constraint] | None:
        """Read the constraints in a file.

        Returns:
            Constraints in file order, or None when the extension is not
            one the loader handles.

        Raises:
            FormatError: The file content is malformed or the Shapefile
                holds a shape type other than PolyLineZ/PolygonZ.
        """
        from tinfeed.io.registry import io_registry, _ensure_registered

        _ensure_registered()
        reader = io_registry.get_constraint_reader(str(path))
        if reader is None:
            logger.debug("No constraint reader for %s", path)
            return None

        options: dict[str, Any] = {
            "transform": self.transform,
            "first_vertex_index": self._total_point_count,
        }
        if isinstance(reader, ShapefileConstraintReader):
            options["z_field"] = self.dbf_field_for_z
            options["app_data_field"] = self.dbf_field_for_app_data
        constraints = reader.read(str(path), **options)
        self._total_point_count += reader.total_point_count
        return constraints


def write_constraint_file(path: str | Path, constraints: list[Constraint]) -> None:
    """Write constraints in the multi-constraint text layout.

    Each constraint is written as a count line with a ``polygon`` or
    ``linear`` keyword followed by its ``x,y,z`` lines. Coordinates use
    the shortest text that reads back to the same float.
    """
    with open(path, "w", encoding="utf-8") as f:
        for con in constraints:
            kind = "polygon" if con.is_polygon else "linear"
            f.write(f"{len(con)}, {kind}\n")
            for v in con:
                f.write(f"{v.x!r},{v.y!r},{v.z!r}\n")

