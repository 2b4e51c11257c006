"""Shapefile (.shp) geometry reader."""

from __future__ import annotations

import logging
import math
from enum import Enum
from pathlib import Path
from typing import Any, Iterator

import numpy as np

from tinfeed.core.bounds import Bounds
from tinfeed.core.metadata import Metadata
from tinfeed.core.vertex import Vertex
from tinfeed.errors import FormatError, StateError
from tinfeed.io.base import VertexReader
from tinfeed.io.binary import ByteRecordReader
from tinfeed.io.dbf import DbfFileReader

logger = logging.getLogger(__name__)

SHAPEFILE_FILE_CODE = 9994
_HEADER_SIZE = 100
_RECORD_HEADER_SIZE = 8


class ShapefileType(Enum):
    """Shape type codes of the ESRI Shapefile format.

    Attributes:
        code: Integer code stored in the file.
        has_z: Whether records carry a Z block.
    """

    NULL_SHAPE = (0, False)
    POINT = (1, False)
    POLYLINE = (3, False)
    POLYGON = (5, False)
    MULTIPOINT = (8, False)
    POINT_Z = (11, True)
    POLYLINE_Z = (13, True)
    POLYGON_Z = (15, True)
    MULTIPOINT_Z = (18, True)
    POINT_M = (21, False)
    POLYLINE_M = (23, False)
    POLYGON_M = (25, False)
    MULTIPOINT_M = (28, False)
    MULTIPATCH = (31, True)

    def __init__(self, code: int, has_z: bool) -> None:
        self.code = code
        self.has_z = has_z

    @classmethod
    def from_code(cls, code: int) -> ShapefileType | None:
        for member in cls:
            if member.code == code:
                return member
        return None

    @property
    def is_point(self) -> bool:
        return self in (ShapefileType.POINT, ShapefileType.POINT_Z, ShapefileType.POINT_M)

    @property
    def is_multipoint(self) -> bool:
        return self in (
            ShapefileType.MULTIPOINT, ShapefileType.MULTIPOINT_Z, ShapefileType.MULTIPOINT_M
        )

    @property
    def is_polyline(self) -> bool:
        return self in (
            ShapefileType.POLYLINE, ShapefileType.POLYLINE_Z, ShapefileType.POLYLINE_M
        )

    @property
    def is_polygon(self) -> bool:
        return self in (
            ShapefileType.POLYGON, ShapefileType.POLYGON_Z, ShapefileType.POLYGON_M
        )

    @property
    def is_decodable(self) -> bool:
        return self is not ShapefileType.MULTIPATCH


class ShapeRecord:
    """Reusable container for one decoded Shapefile record.

    `xyz` and `part_start` are grow-only buffers: they are reallocated
    only when a record needs more room than any before it, so their
    length is a capacity, not a count. Use `n_points` and `n_parts`, or
    the `coordinates` and `get_part` views.

    `part_start` holds n_parts + 1 entries; the last is n_points, so
    part i spans points ``part_start[i]:part_start[i + 1]``.

    A record is overwritten by the next read that reuses it.
    """

    def __init__(self) -> None:
        self.shape_type = ShapefileType.NULL_SHAPE
        self.record_number = 0
        self.offset = 0
        self.n_points = 0
        self.n_parts = 0
        self.part_start = np.zeros(2, dtype=np.int64)
        self.xyz = np.zeros(3 * 16, dtype=np.float64)
        self.min_x = self.min_y = self.min_z = math.inf
        self.max_x = self.max_y = self.max_z = -math.inf

    def set_sizes(self, n_points: int, n_parts: int) -> None:
        """Set counts, growing the buffers if needed."""
        self.n_points = n_points
        self.n_parts = n_parts
        if len(self.xyz) < 3 * n_points:
            self.xyz = np.zeros(3 * n_points, dtype=np.float64)
        if len(self.part_start) < n_parts + 1:
            self.part_start = np.zeros(n_parts + 1, dtype=np.int64)

    @property
    def coordinates(self) -> np.ndarray:
        """(n_points, 3) view of the live coordinates."""
        return self.xyz[: 3 * self.n_points].reshape(self.n_points, 3)

    def get_part(self, index: int) -> np.ndarray:
        """(n, 3) view of the coordinates of one part."""
        if index < 0 or index >= self.n_parts:
            raise IndexError(f"Part {index} out of range [0, {self.n_parts})")
        start = int(self.part_start[index])
        stop = int(self.part_start[index + 1])
        return self.coordinates[start:stop]

    def parts(self) -> Iterator[np.ndarray]:
        for i in range(self.n_parts):
            yield self.get_part(i)

    @property
    def bounds(self) -> Bounds:
        return Bounds(
            self.min_x, self.min_y, self.min_z, self.max_x, self.max_y, self.max_z
        )

    def __repr__(self) -> str:
        return (
            f"ShapeRecord({self.shape_type.name}, record={self.record_number}, "
            f"parts={self.n_parts}, points={self.n_points})"
        )


class ShapefileReader:
    """Sequential reader for a Shapefile's geometry records.

    Args:
        path: Path to a .shp file.

    Raises:
        FormatError: Bad file code, unknown shape type, or a header
            truncated before 100 bytes.

    Examples:
        >>> with ShapefileReader("shoreline.shp") as shp:
        ...     record = ShapeRecord()
        ...     while shp.has_next():
        ...         shp.read_next_record(record)
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._reader = ByteRecordReader(path)
        try:
            self._read_header()
        except Exception:
            self._reader.close()
            raise
        self._position = _HEADER_SIZE
        self.records_read = 0
        self.total_points_read = 0
        self.total_parts_read = 0
        logger.info(
            "Opened %s: %s, %d bytes", self._path, self.shape_type.name, self.file_length
        )

    def _read_header(self) -> None:
        r = self._reader
        file_code = r.read_int_big_endian()
        if file_code != SHAPEFILE_FILE_CODE:
            raise FormatError(
                f"Not a recognized Shapefile (file code {file_code})", path=str(self._path)
            )
        r.seek(24)
        self.file_length = r.read_int_big_endian() * 2
        self.version = r.read_int()
        code = r.read_int()
        shape_type = ShapefileType.from_code(code)
        if shape_type is None:
            raise FormatError(f"Invalid shape type code {code}", path=str(self._path))
        self.shape_type = shape_type
        self.min_x = r.read_double()
        self.min_y = r.read_double()
        self.max_x = r.read_double()
        self.max_y = r.read_double()
        self.min_z = r.read_double()
        self.max_z = r.read_double()
        r.skip_bytes(16)  # M range
        if self.min_z == 0 and self.max_z == 0:
            # no Z range recorded
            self.min_z = math.inf
            self.max_z = -math.inf

    @property
    def path(self) -> Path:
        return self._path

    @property
    def bounds(self) -> Bounds:
        return Bounds(
            self.min_x, self.min_y, self.min_z, self.max_x, self.max_y, self.max_z
        )

    def has_next(self) -> bool:
        """True while another record header fits before the end of file."""
        return self.file_length - self._position > _RECORD_HEADER_SIZE

    def read_next_record(self, record: ShapeRecord | None = None) -> ShapeRecord:
        """Decode the next record.

        Args:
            record: Container to overwrite; a new one is made if None.

        Returns:
            The filled record.

        Raises:
            StateError: The reader has been closed.
            FormatError: The record's type differs from the file's, or
                the type cannot be decoded, or the file is truncated.
        """
        if self._reader.closed:
            raise StateError(f"Reader for {self._path} is closed")
        if record is None:
            record = ShapeRecord()
        r = self._reader
        offset = self._position
        r.seek(offset)
        record_number = r.read_int_big_endian()
        content_words = r.read_int_big_endian()
        code = r.read_int()

        record.record_number = record_number
        record.offset = offset
        if code == ShapefileType.NULL_SHAPE.code:
            record.shape_type = ShapefileType.NULL_SHAPE
            record.set_sizes(0, 0)
            record.part_start[0] = 0
            record.min_x = record.min_y = record.min_z = math.inf
            record.max_x = record.max_y = record.max_z = -math.inf
        else:
            if code != self.shape_type.code:
                raise FormatError(
                    f"Shape type {code} does not match file type {self.shape_type.code}",
                    path=str(self._path), record=record_number,
                )
            if not self.shape_type.is_decodable:
                raise FormatError(
                    f"Unsupported shape type {self.shape_type.name}",
                    path=str(self._path), record=record_number,
                )
            record.shape_type = self.shape_type
            try:
                self._decode(record)
            except FormatError as e:
                raise FormatError(
                    e.message, path=str(self._path), record=record_number
                ) from e

        self._position = offset + _RECORD_HEADER_SIZE + content_words * 2
        self.records_read += 1
        self.total_points_read += record.n_points
        self.total_parts_read += record.n_parts
        return record

    def _decode(self, record: ShapeRecord) -> None:
        r = self._reader
        stype = self.shape_type

        if stype.is_point:
            x, y = r.read_double(), r.read_double()
            z = r.read_double() if stype.has_z else 0.0
            record.set_sizes(1, 1)
            record.part_start[0] = 0
            record.part_start[1] = 1
            record.xyz[0:3] = (x, y, z)
            record.min_x = record.max_x = x
            record.min_y = record.max_y = y
            record.min_z = record.max_z = z
            return

        record.min_x = r.read_double()
        record.min_y = r.read_double()
        record.max_x = r.read_double()
        record.max_y = r.read_double()
        if stype.is_multipoint:
            n_parts = 1
            n_points = r.read_int()
            record.set_sizes(n_points, n_parts)
            record.part_start[0] = 0
        else:
            n_parts = r.read_int()
            n_points = r.read_int()
            record.set_sizes(n_points, n_parts)
            record.part_start[:n_parts] = np.frombuffer(
                r.read_bytes(4 * n_parts), dtype="<i4"
            )
        record.part_start[n_parts] = n_points

        coords = record.xyz[: 3 * n_points].reshape(n_points, 3)
        xy = np.frombuffer(r.read_bytes(16 * n_points), dtype="<f8")
        coords[:, :2] = xy.reshape(n_points, 2)
        if stype.has_z:
            record.min_z = r.read_double()
            record.max_z = r.read_double()
            coords[:, 2] = np.frombuffer(r.read_bytes(8 * n_points), dtype="<f8")
        else:
            coords[:, 2] = 0.0
            record.min_z = record.max_z = 0.0

    def records(self) -> Iterator[ShapeRecord]:
        """Iterate all remaining records, reusing one container."""
        record = ShapeRecord()
        while self.has_next():
            yield self.read_next_record(record)

    def get_dbf_reader(self) -> DbfFileReader:
        """Open the attribute table stored beside this Shapefile.

        The extension follows the case of the .shp extension.

        Raises:
            FileNotFoundError: There is no matching .dbf file.
        """
        suffix = ".DBF" if self._path.suffix.isupper() else ".dbf"
        dbf_path = self._path.with_suffix(suffix)
        if not dbf_path.exists():
            raise FileNotFoundError(f"No DBF file {dbf_path} for {self._path}")
        return DbfFileReader(dbf_path)

    # ── Lifecycle ───────────────────────────────────────────────────

    def close(self) -> None:
        self._reader.close()

    @property
    def closed(self) -> bool:
        return self._reader.closed

    def __enter__(self) -> ShapefileReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ShapefileReader({str(self._path)!r}, {self.shape_type.name})"


class ShapefileVertexReader(VertexReader):
    """Read every point of every Shapefile record as a vertex.

    Each vertex takes its record number as id.

    Options:
        z_field: str, numeric DBF field supplying z for every point of a
            record, replacing the Shapefile z values (needed for 2D types).
        transform: object with ``forward(x, y) -> (x, y)`` applied to every
            vertex.
    """

    def __init__(self) -> None:
        self.bounds: Bounds | None = None
        self.metadata: Metadata | None = None

    def iter_vertices(self, path: str, **options: Any) -> Iterator[Vertex]:
        z_field_name = options.get("z_field")
        transform = options.get("transform")

        with ShapefileReader(path) as shp:
            dbf = shp.get_dbf_reader() if z_field_name else None
            try:
                z_field = None
                if dbf is not None:
                    z_field = dbf.get_field_by_name(z_field_name)
                    if z_field is None or not z_field.is_numeric:
                        raise FormatError(
                            f"Field '{z_field_name}' for z is missing or not numeric",
                            path=dbf.path,
                        )

                lo = np.full(3, np.inf)
                hi = np.full(3, -np.inf)
                count = 0
                for record in shp.records():
                    if record.n_points == 0:
                        continue
                    coords = record.coordinates.copy()
                    if z_field is not None:
                        coords[:, 2] = dbf.read_double(record.record_number, z_field)
                    for x, y, z in coords:
                        x, y, z = float(x), float(y), float(z)
                        if transform is not None:
                            try:
                                x, y = transform.forward(x, y)
                            except ValueError as e:
                                raise FormatError(
                                    f"Unable to transform coordinates ({x}, {y}): {e}",
                                    path=str(path), record=record.record_number,
                                ) from e
                        lo = np.minimum(lo, (x, y, z))
                        hi = np.maximum(hi, (x, y, z))
                        count += 1
                        yield Vertex(x, y, z, index=record.record_number)
            finally:
                if dbf is not None:
                    dbf.close()

        self.bounds = Bounds(*lo, *hi) if count else None
        self.metadata = Metadata(
            source_file=str(path), source_format="shp",
            record_count=count, bounds=self.bounds,
        )
        logger.info("Read %d vertices from %s", count, path)

    @classmethod
    def extensions(cls) -> list[str]:
        return [".shp"]

    @classmethod
    def type_name(cls) -> str:
        return "readers.shapefile"
