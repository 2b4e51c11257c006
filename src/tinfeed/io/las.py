"""LAS reader: header, variable-length records and point records.

Decodes uncompressed LAS 1.0 through 1.4 files directly from their bytes.
Compressed (LAZ) files are recognized from the point format byte and
rejected on any record access.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

import numpy as np

from tinfeed.core.bounds import Bounds
from tinfeed.core.metadata import Metadata
from tinfeed.core.transform import SimpleGeographicTransform
from tinfeed.core.units import LinearUnits
from tinfeed.core.vertex import Vertex
from tinfeed.errors import FormatError, StateError
from tinfeed.filters.base import RecordFilter
from tinfeed.filters.registry import build_filter
from tinfeed.io.base import VertexReader
from tinfeed.io.binary import ByteRecordReader
from tinfeed.io.geotiff import (
    GEO_ASCII_PARAMS_TAG,
    GEO_DOUBLE_PARAMS_TAG,
    GEO_KEY_DIRECTORY_TAG,
    OGC_WKT_RECORD_ID,
    GeoKey,
    GeoTiffData,
    GtModelType,
    parse_key_entries,
)
from tinfeed.io.gps_time import adjusted_gps_to_datetime

if TYPE_CHECKING:
    from pyproj import CRS

logger = logging.getLogger(__name__)

LAS_SIGNATURE = b"LASF"

# LAS 1.3 adds the waveform offset, LAS 1.4 the EVLR and 64-bit counts
_WAVEFORM_HEADER_SIZE = 235
_EXTENDED_HEADER_SIZE = 375

# Global encoding bits
_GPS_SATELLITE_BIT = 0x01
_WKT_BIT = 0x10

# Point record layouts. Legacy: x, y, z, intensity, return byte,
# classification byte, then scan angle, user data, point source id.
# Modern: x, y, z, intensity, return byte, flag byte, classification,
# then user data, scan angle, point source id and GPS time.
_LEGACY_STRUCT = struct.Struct("<iiiHBB4x")
_LEGACY_GPS_STRUCT = struct.Struct("<iiiHBB4xd")
_MODERN_STRUCT = struct.Struct("<iiiHBBB5xd")


class CoordinateReferenceSystemOption(Enum):
    """How the file declares its coordinate reference system."""

    GEOTIFF = "geotiff"
    WKT = "wkt"


class GpsTimeType(Enum):
    """Interpretation of the GPS time field."""

    WEEK_TIME = "week"
    SATELLITE_TIME = "satellite"


class PointLayout(Enum):
    """Bit layout of a point record, selected once per file.

    Formats 7-10 extend format 6 and share its layout; 0-6 is the core range.
    """

    LEGACY = "legacy"
    MODERN = "modern"

    @classmethod
    def for_format(cls, point_format: int) -> PointLayout | None:
        if 0 <= point_format <= 5:
            return cls.LEGACY
        if 6 <= point_format <= 10:
            return cls.MODERN
        return None


@dataclass(frozen=True)
class ScaleAndOffset:
    """Per-axis transform from stored integers to coordinates."""

    x_scale: float
    y_scale: float
    z_scale: float
    x_offset: float
    y_offset: float
    z_offset: float


@dataclass(frozen=True)
class VariableLengthRecord:
    """Header of a variable-length record.

    Attributes:
        offset: File position of the payload (just past the 54-byte header).
        user_id: Registered user id, e.g. "LASF_Projection".
        record_id: Record id within the user id's namespace.
        record_length: Payload length in bytes.
        description: Free text description.
    """

    offset: int
    user_id: str
    record_id: int
    record_length: int
    description: str


@dataclass
class LasHeader:
    """Public header block of a LAS file.

    Field order follows the file. Bounds are stored max-before-min in the
    file; here they are plain attributes.
    """

    file_source_id: int
    global_encoding: int
    version_major: int
    version_minor: int
    system_identifier: str
    generating_software: str
    creation_day_of_year: int
    creation_year: int
    header_size: int
    offset_to_point_data: int
    number_of_variable_length_records: int
    point_data_record_format: int
    compressed: bool
    point_data_record_length: int
    legacy_number_of_point_records: int
    legacy_number_of_points_by_return: list[int]
    x_scale: float
    y_scale: float
    z_scale: float
    x_offset: float
    y_offset: float
    z_offset: float
    max_x: float
    min_x: float
    max_y: float
    min_y: float
    max_z: float
    min_z: float
    start_of_waveform_data: int = 0
    start_of_extended_vlrs: int = 0
    number_of_extended_vlrs: int = 0
    number_of_point_records: int = 0
    number_of_points_by_return: list[int] = field(default_factory=list)

    @property
    def version(self) -> str:
        return f"{self.version_major}.{self.version_minor}"

    @property
    def creation_date(self) -> datetime | None:
        """Creation date at UTC midnight, None when the header leaves it unset."""
        year = self.creation_year
        day = self.creation_day_of_year
        if not (1 <= year <= 9999 and 1 <= day <= 366):
            return None
        date = datetime(year, 1, 1, tzinfo=timezone.utc) + timedelta(days=day - 1)
        if date.year != year:
            return None
        return date

    @property
    def crs_option(self) -> CoordinateReferenceSystemOption:
        if self.global_encoding & _WKT_BIT:
            return CoordinateReferenceSystemOption.WKT
        return CoordinateReferenceSystemOption.GEOTIFF

    @property
    def gps_time_type(self) -> GpsTimeType:
        if self.global_encoding & _GPS_SATELLITE_BIT:
            return GpsTimeType.SATELLITE_TIME
        return GpsTimeType.WEEK_TIME

    @property
    def scale_and_offset(self) -> ScaleAndOffset:
        return ScaleAndOffset(
            self.x_scale, self.y_scale, self.z_scale,
            self.x_offset, self.y_offset, self.z_offset,
        )

    @property
    def bounds(self) -> Bounds:
        return Bounds(
            minx=self.min_x, miny=self.min_y, minz=self.min_z,
            maxx=self.max_x, maxy=self.max_y, maxz=self.max_z,
        )

    @property
    def point_layout(self) -> PointLayout | None:
        return PointLayout.for_format(self.point_data_record_format)


@dataclass
class LasPoint:
    """Scratch record overwritten by each `LasFileReader.read_record` call.

    `overlap` and `scanner_channel` are only carried by formats 6-10.
    `gps_time` is None for formats without a time field (0 and 2).
    """

    file_position: int = 0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    intensity: int = 0
    return_number: int = 0
    number_of_returns: int = 0
    scan_direction_flag: int = 0
    edge_of_flight_line: bool = False
    classification: int = 0
    synthetic: bool = False
    keypoint: bool = False
    withheld: bool = False
    overlap: bool = False
    scanner_channel: int = 0
    gps_time: float | None = None


class LasFileReader:
    """Random-access reader for a LAS file.

    The header and VLR list are decoded on construction; point records are
    decoded on demand into a caller-owned `LasPoint`.

    Args:
        path: Path to a .las file.

    Raises:
        FormatError: The file does not start with the LAS signature or is
            truncated inside the header.

    Examples:
        >>> with LasFileReader("tile.las") as reader:
        ...     p = LasPoint()
        ...     reader.read_record(0, p)
        ...     print(p.x, p.y, p.z)
    """

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._reader = ByteRecordReader(path)
        self._vlrs: list[VariableLengthRecord] = []
        self._geo_tiff_data: GeoTiffData | None = None
        self._gt_model_type = GtModelType.UNKNOWN
        self._linear_units = LinearUnits.UNKNOWN
        self._wkt: str | None = None
        try:
            self.header = self._read_header()
            self._read_variable_length_records()
            self._read_georeference()
        except Exception:
            self._reader.close()
            raise

        layout = self.header.point_layout
        self._layout = layout
        self._gps_in_legacy = self.header.point_data_record_format in (1, 3, 4, 5)
        if layout is PointLayout.MODERN:
            self._struct = _MODERN_STRUCT
        elif self._gps_in_legacy:
            self._struct = _LEGACY_GPS_STRUCT
        else:
            self._struct = _LEGACY_STRUCT
        self._buffer = bytearray(self._struct.size)

        logger.info(
            "Opened %s: LAS %s, format %d%s, %d records, %d VLRs",
            self._path, self.header.version,
            self.header.point_data_record_format,
            " (compressed)" if self.header.compressed else "",
            self.header.number_of_point_records, len(self._vlrs),
        )

    # ── Header ──────────────────────────────────────────────────────

    def _read_header(self) -> LasHeader:
        r = self._reader
        signature = r.read_bytes(4)
        if signature != LAS_SIGNATURE:
            raise FormatError("Not a recognized LAS file", path=self._path)

        file_source_id = r.read_unsigned_short()
        global_encoding = r.read_unsigned_short()
        r.skip_bytes(16)  # project GUID
        version_major = r.read_unsigned_byte()
        version_minor = r.read_unsigned_byte()
        system_identifier = r.read_ascii(32)
        generating_software = r.read_ascii(32)
        day_of_year = r.read_unsigned_short()
        year = r.read_unsigned_short()
        header_size = r.read_unsigned_short()
        offset_to_point_data = r.read_unsigned_int()
        n_vlrs = r.read_unsigned_int()
        format_byte = r.read_unsigned_byte()
        record_length = r.read_unsigned_short()
        legacy_count = r.read_unsigned_int()
        legacy_by_return = [r.read_unsigned_int() for _ in range(5)]
        x_scale, y_scale, z_scale = r.read_double(), r.read_double(), r.read_double()
        x_offset, y_offset, z_offset = r.read_double(), r.read_double(), r.read_double()
        max_x, min_x = r.read_double(), r.read_double()
        max_y, min_y = r.read_double(), r.read_double()
        max_z, min_z = r.read_double(), r.read_double()

        header = LasHeader(
            file_source_id=file_source_id,
            global_encoding=global_encoding,
            version_major=version_major,
            version_minor=version_minor,
            system_identifier=system_identifier,
            generating_software=generating_software,
            creation_day_of_year=day_of_year,
            creation_year=year,
            header_size=header_size,
            offset_to_point_data=offset_to_point_data,
            number_of_variable_length_records=n_vlrs,
            point_data_record_format=format_byte & 0x3F,
            compressed=bool(format_byte & 0x80),
            point_data_record_length=record_length,
            legacy_number_of_point_records=legacy_count,
            legacy_number_of_points_by_return=legacy_by_return,
            x_scale=x_scale, y_scale=y_scale, z_scale=z_scale,
            x_offset=x_offset, y_offset=y_offset, z_offset=z_offset,
            max_x=max_x, min_x=min_x,
            max_y=max_y, min_y=min_y,
            max_z=max_z, min_z=min_z,
        )

        if header_size >= _WAVEFORM_HEADER_SIZE:
            header.start_of_waveform_data = r.read_long()
        if header_size >= _EXTENDED_HEADER_SIZE:
            header.start_of_extended_vlrs = r.read_long()
            header.number_of_extended_vlrs = r.read_unsigned_int()
            header.number_of_point_records = r.read_long()
            header.number_of_points_by_return = [r.read_long() for _ in range(15)]
        else:
            header.number_of_point_records = legacy_count
            header.number_of_points_by_return = legacy_by_return + [0] * 10

        if header.number_of_point_records == 0 and legacy_count > 0:
            # some 1.4 writers only fill the legacy count
            header.number_of_point_records = legacy_count
        return header

    def _read_variable_length_records(self) -> None:
        r = self._reader
        r.seek(self.header.header_size)
        for _ in range(self.header.number_of_variable_length_records):
            r.skip_bytes(2)  # reserved
            user_id = r.read_ascii(16)
            record_id = r.read_unsigned_short()
            record_length = r.read_unsigned_short()
            description = r.read_ascii(32)
            vlr = VariableLengthRecord(
                offset=r.position,
                user_id=user_id,
                record_id=record_id,
                record_length=record_length,
                description=description,
            )
            logger.debug(
                "VLR %s/%d, %d bytes at %d: %s",
                user_id, record_id, record_length, vlr.offset, description,
            )
            self._vlrs.append(vlr)
            r.skip_bytes(record_length)

    def _read_georeference(self) -> None:
        if self.header.crs_option is CoordinateReferenceSystemOption.WKT:
            vlr = self.get_vlr_by_record_id(OGC_WKT_RECORD_ID)
            if vlr is None:
                logger.warning("%s declares WKT but has no WKT record", self._path)
            else:
                raw = self.read_vlr_bytes(vlr)
                self._wkt = raw.decode("utf-8", errors="replace").rstrip("\x00")
            return

        vlr = self.get_vlr_by_record_id(GEO_KEY_DIRECTORY_TAG)
        if vlr is None:
            logger.debug("%s has no GeoKeyDirectory record", self._path)
            return

        r = self._reader
        r.seek(vlr.offset + 6)
        n_keys = r.read_unsigned_short()
        shorts = np.frombuffer(r.read_bytes(n_keys * 8), dtype="<u2")
        keys = parse_key_entries(shorts)

        doubles = None
        double_vlr = self.get_vlr_by_record_id(GEO_DOUBLE_PARAMS_TAG)
        if double_vlr is not None:
            doubles = self.read_vlr_doubles(double_vlr)
        ascii_text = None
        ascii_vlr = self.get_vlr_by_record_id(GEO_ASCII_PARAMS_TAG)
        if ascii_vlr is not None:
            ascii_text = self.read_vlr_bytes(ascii_vlr).decode("latin-1")

        gtd = GeoTiffData(keys, doubles, ascii_text)
        self._geo_tiff_data = gtd
        self._gt_model_type = gtd.model_type
        for entry in keys:
            logger.debug("GeoKey %s", entry)

        # vertical units win; the two are assumed to coincide
        if gtd.contains_key(GeoKey.VerticalUnitsGeoKey):
            unit_code = gtd.get_integer(GeoKey.VerticalUnitsGeoKey)
        else:
            unit_code = gtd.get_integer(GeoKey.ProjLinearUnitsGeoKey)
        self._linear_units = LinearUnits.from_unit_code(unit_code)

    # ── Variable-length records ─────────────────────────────────────

    @property
    def variable_length_records(self) -> list[VariableLengthRecord]:
        return list(self._vlrs)

    def get_vlr_by_record_id(self, record_id: int) -> VariableLengthRecord | None:
        """First VLR with the given record id, or None."""
        for vlr in self._vlrs:
            if vlr.record_id == record_id:
                return vlr
        return None

    def read_vlr_bytes(self, vlr: VariableLengthRecord) -> bytes:
        """Raw payload of a variable-length record."""
        self._reader.seek(vlr.offset)
        return self._reader.read_bytes(vlr.record_length)

    def read_vlr_unsigned_shorts(self, vlr: VariableLengthRecord) -> np.ndarray:
        """Payload of a variable-length record as unsigned 16-bit values."""
        raw = self.read_vlr_bytes(vlr)
        return np.frombuffer(raw, dtype="<u2", count=len(raw) // 2).astype(np.int64)

    def read_vlr_doubles(self, vlr: VariableLengthRecord) -> np.ndarray:
        """Payload of a variable-length record as 64-bit floats."""
        raw = self.read_vlr_bytes(vlr)
        return np.frombuffer(raw, dtype="<f8", count=len(raw) // 8).copy()

    # ── Georeferencing ──────────────────────────────────────────────

    @property
    def geo_tiff_data(self) -> GeoTiffData | None:
        """GeoTIFF keys, None when the file carries no key directory."""
        return self._geo_tiff_data

    @property
    def gt_model_type(self) -> GtModelType:
        return self._gt_model_type

    @property
    def uses_geographic_model(self) -> bool:
        """True when GTModelTypeGeoKey declares a geographic model.

        False for projected and for unknown models; check
        `is_geographic_model_type_known` to tell them apart.
        """
        return self._gt_model_type is GtModelType.GEOGRAPHIC

    @property
    def is_geographic_model_type_known(self) -> bool:
        return self._gt_model_type is not GtModelType.UNKNOWN

    @property
    def linear_units(self) -> LinearUnits:
        return self._linear_units

    @property
    def wkt(self) -> str | None:
        """WKT text of the coordinate system when the file uses WKT.

        The text is exposed as found; it is not interpreted.
        """
        return self._wkt

    @cached_property
    def crs(self) -> CRS | None:
        """pyproj CRS for an EPSG-coded GeoTIFF system, else None."""
        from tinfeed.utils.crs import crs_from_geotiff

        return crs_from_geotiff(self._geo_tiff_data)

    def uses_geographic_coordinates(self) -> bool:
        """Whether x/y are longitude/latitude.

        Uses the GeoTIFF model type when declared. Otherwise falls back to
        a rule of thumb: a bounding box that fits inside plausible degree
        ranges and spans no more than 10 units in either axis.
        """
        if self.is_geographic_model_type_known:
            return self.uses_geographic_model
        h = self.header
        if h.min_x < -180 or h.max_x > 360 or h.max_x - h.min_x > 10:
            return False
        if h.min_y < -90 or h.max_y > 90 or h.max_y - h.min_y > 10:
            return False
        return True

    # ── Records ─────────────────────────────────────────────────────

    @property
    def number_of_point_records(self) -> int:
        return self.header.number_of_point_records

    @property
    def is_compressed(self) -> bool:
        return self.header.compressed

    @property
    def path(self) -> str:
        return self._path

    def read_record(self, index: int, point: LasPoint) -> LasPoint:
        """Decode the record at a zero-based index into `point`.

        The point is overwritten in place and returned for convenience.
        It stays valid until the next call on the same point.

        Raises:
            StateError: The reader has been closed.
            FormatError: The file is compressed, the index is outside
                [0, number_of_point_records), or the point format is
                not supported.
        """
        if self._reader.closed:
            raise StateError(f"Reader for {self._path} is closed")
        h = self.header
        if h.compressed:
            raise FormatError(
                "Compressed-format files are not supported by this reader",
                path=self._path,
            )
        n = h.number_of_point_records
        if index < 0 or index >= n:
            raise FormatError(
                f"Record index {index} out of bounds [0, {n})",
                path=self._path, record=index,
            )
        if self._layout is None:
            raise FormatError(
                f"Unsupported point data record format {h.point_data_record_format}",
                path=self._path, record=index,
            )

        position = h.offset_to_point_data + index * h.point_data_record_length
        self._reader.seek(position)
        self._reader.read_into(self._buffer)
        point.file_position = position

        if self._layout is PointLayout.MODERN:
            ix, iy, iz, intensity, returns, flags, cls, gps = (
                self._struct.unpack_from(self._buffer)
            )
            point.return_number = returns & 0x0F
            point.number_of_returns = (returns >> 4) & 0x0F
            point.synthetic = bool(flags & 0x01)
            point.keypoint = bool(flags & 0x02)
            point.withheld = bool(flags & 0x04)
            point.overlap = bool(flags & 0x08)
            point.scanner_channel = (flags >> 4) & 0x03
            point.scan_direction_flag = (flags >> 6) & 0x01
            point.edge_of_flight_line = bool(flags & 0x80)
            point.classification = cls
            point.gps_time = gps
        else:
            if self._gps_in_legacy:
                ix, iy, iz, intensity, returns, cls, gps = (
                    self._struct.unpack_from(self._buffer)
                )
                point.gps_time = gps
            else:
                ix, iy, iz, intensity, returns, cls = (
                    self._struct.unpack_from(self._buffer)
                )
                point.gps_time = None
            point.return_number = returns & 0x07
            point.number_of_returns = (returns >> 3) & 0x07
            # bit 5, shared with the top bit of the return count
            point.scan_direction_flag = (returns >> 5) & 0x01
            point.edge_of_flight_line = bool(returns & 0x80)
            point.classification = cls & 0x1F
            point.synthetic = bool(cls & 0x20)
            point.keypoint = bool(cls & 0x40)
            point.withheld = bool(cls & 0x80)
            point.overlap = False
            point.scanner_channel = 0

        point.x = ix * h.x_scale + h.x_offset
        point.y = iy * h.y_scale + h.y_offset
        point.z = iz * h.z_scale + h.z_offset
        point.intensity = intensity
        return point

    def records(self, start: int = 0, stop: int | None = None) -> Iterator[LasPoint]:
        """Iterate records, yielding one scratch point overwritten each step."""
        n = self.number_of_point_records
        stop = n if stop is None else min(stop, n)
        point = LasPoint()
        for i in range(start, stop):
            yield self.read_record(i, point)

    def gps_time_to_datetime(self, gps_time: float) -> datetime:
        """Convert a record's GPS time to UTC.

        Only meaningful for satellite (adjusted standard) GPS time; week
        time carries no week number and cannot be placed on a calendar.

        Raises:
            ValueError: If the file records GPS week time.
        """
        if self.header.gps_time_type is not GpsTimeType.SATELLITE_TIME:
            raise ValueError(
                "GPS week time has no week number; cannot convert to a date"
            )
        return adjusted_gps_to_datetime(gps_time)

    @property
    def metadata(self) -> Metadata:
        h = self.header
        extra: dict[str, Any] = {}
        if self._gt_model_type is not GtModelType.UNKNOWN:
            extra["gt_model_type"] = self._gt_model_type.name.lower()
        return Metadata(
            source_file=str(Path(self._path).resolve()),
            source_format="las",
            record_count=h.number_of_point_records,
            bounds=h.bounds,
            creation_date=h.creation_date,
            software=h.generating_software or None,
            system_identifier=h.system_identifier or None,
            point_format_id=h.point_data_record_format,
            file_version=h.version,
            linear_units=self._linear_units.label,
            geographic=self.uses_geographic_coordinates(),
            crs_wkt=self._wkt,
            extra=extra,
        )

    # ── Lifecycle ───────────────────────────────────────────────────

    def close(self) -> None:
        self._reader.close()

    @property
    def closed(self) -> bool:
        return self._reader.closed

    def __enter__(self) -> LasFileReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        date = self.header.creation_date
        created = date.strftime("%d %b %Y") if date else "unknown date"
        return (
            f"LAS vers {self.header.version}, created {created}, "
            f"nrecs {self.header.number_of_point_records}"
        )


class LasVertexReader(VertexReader):
    """Read LAS records as vertices for triangulation.

    Withheld records are always skipped. Each vertex takes the record
    index as its id and carries the record's classification.

    Options:
        filter: RecordFilter, filter type name, stage dict or list of these
            deciding which records to keep (default: all).
        max_vertices: int, stop after this many vertices (default: no limit).
        geographic: bool or None. Project longitude/latitude to planar
            units with a SimpleGeographicTransform centered on the file's
            bounds. None (default) decides from the file's georeferencing.
        units: LinearUnits of the projected output. Defaults to the
            file's declared units, meters when unknown.
    """

    def __init__(self) -> None:
        self.metadata: Metadata | None = None
        self.transform: SimpleGeographicTransform | None = None
        self.bounds: Bounds | None = None

    def iter_vertices(self, path: str, **options: Any) -> Iterator[Vertex]:
        record_filter: RecordFilter = build_filter(options.get("filter"))
        max_vertices = options.get("max_vertices")
        limit = int(max_vertices) if max_vertices is not None else None

        with LasFileReader(path) as reader:
            self.metadata = reader.metadata
            self.transform = self._make_transform(reader, options)
            transform = self.transform

            count = 0
            minx = miny = minz = np.inf
            maxx = maxy = maxz = -np.inf
            point = LasPoint()
            for index in range(reader.number_of_point_records):
                if limit is not None and count >= limit:
                    break
                reader.read_record(index, point)
                if point.withheld or not record_filter.accept(point):
                    continue
                x, y = point.x, point.y
                if transform is not None:
                    try:
                        x, y = transform.forward(x, y)
                    except ValueError as e:
                        raise FormatError(
                            f"Unable to transform coordinates ({x}, {y}): {e}",
                            path=str(path),
                            record=index,
                        ) from e
                minx, maxx = min(minx, x), max(maxx, x)
                miny, maxy = min(miny, y), max(maxy, y)
                minz, maxz = min(minz, point.z), max(maxz, point.z)
                count += 1
                yield Vertex(
                    x, y, point.z,
                    index=index,
                    classification=point.classification,
                )

            self.bounds = (
                Bounds(minx, miny, minz, maxx, maxy, maxz) if count else None
            )
            logger.info("Read %d vertices from %s", count, path)

    def _make_transform(
        self, reader: LasFileReader, options: dict[str, Any]
    ) -> SimpleGeographicTransform | None:
        geographic = options.get("geographic")
        if geographic is None:
            geographic = reader.uses_geographic_coordinates()
        if not geographic:
            return None
        units = options.get("units")
        if units is None:
            units = reader.linear_units
            if units is LinearUnits.UNKNOWN:
                units = LinearUnits.METERS
        b = reader.header.bounds
        transform = SimpleGeographicTransform(
            center_latitude=b.center_y,
            center_longitude=b.center_x,
            units=units,
        )
        logger.info("Projecting geographic coordinates with %r", transform)
        return transform

    @classmethod
    def extensions(cls) -> list[str]:
        return [".las", ".laz"]

    @classmethod
    def type_name(cls) -> str:
        return "readers.las"

