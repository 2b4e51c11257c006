"""Shared test fixtures.

LAS and DBF files are built byte by byte with struct so that every field
is under the test's control. Shapefiles are written with pyshp in the
tests that need them.
"""

from __future__ import annotations

import struct
from pathlib import Path

import pytest

_LAS_HEADER = struct.Struct("<4sHH16sBB32s32sHHHIIBHI5I12d")
_VLR_HEADER = struct.Struct("<H16sHH32s")

_HEADER_SIZES = {0: 227, 1: 227, 2: 227, 3: 235, 4: 375}
_RECORD_LENGTHS = {0: 20, 1: 28, 2: 26, 3: 34, 6: 30, 7: 36}


def _encode_record(point_format: int, p: dict, scale, offset) -> bytes:
    ix = round((p["x"] - offset[0]) / scale[0])
    iy = round((p["y"] - offset[1]) / scale[1])
    iz = round((p["z"] - offset[2]) / scale[2])
    intensity = p.get("intensity", 0)
    rn = p.get("return_number", 1)
    nr = p.get("number_of_returns", 1)
    sdf = p.get("scan_direction", 0)
    edge = p.get("edge", False)
    cls = p.get("classification", 1)
    gps = p.get("gps_time", 0.0)

    if point_format >= 6:
        returns = (rn & 0x0F) | ((nr & 0x0F) << 4)
        flags = (
            (0x01 if p.get("synthetic") else 0)
            | (0x02 if p.get("keypoint") else 0)
            | (0x04 if p.get("withheld") else 0)
            | (0x08 if p.get("overlap") else 0)
            | ((p.get("scanner_channel", 0) & 0x03) << 4)
            | ((sdf & 0x01) << 6)
            | (0x80 if edge else 0)
        )
        raw = struct.pack(
            "<iiiHBBBBhHd", ix, iy, iz, intensity, returns, flags, cls, 0, 0, 0, gps
        )
        if point_format == 7:
            raw += struct.pack("<HHH", *p.get("rgb", (0, 0, 0)))
        return raw

    returns = (rn & 0x07) | ((nr & 0x07) << 3) | ((sdf & 0x01) << 5) | (0x80 if edge else 0)
    cls_byte = (
        (cls & 0x1F)
        | (0x20 if p.get("synthetic") else 0)
        | (0x40 if p.get("keypoint") else 0)
        | (0x80 if p.get("withheld") else 0)
    )
    raw = struct.pack("<iiiHBBbBH", ix, iy, iz, intensity, returns, cls_byte, 0, 0, 0)
    if point_format in (1, 3):
        raw += struct.pack("<d", gps)
    if point_format in (2, 3):
        raw += struct.pack("<HHH", *p.get("rgb", (0, 0, 0)))
    return raw


def build_las(
    path: Path,
    points: list[dict] | None = None,
    *,
    point_format: int = 0,
    version: tuple[int, int] = (1, 2),
    header_size: int | None = None,
    global_encoding: int = 0,
    vlrs: list[tuple[str, int, bytes]] | None = None,
    compressed: bool = False,
    scale: tuple[float, float, float] = (0.01, 0.01, 0.01),
    offset: tuple[float, float, float] = (0.0, 0.0, 0.0),
    bounds: tuple[float, float, float, float, float, float] | None = None,
    legacy_count: int | None = None,
    extended_count: int | None = None,
    creation: tuple[int, int] = (32, 2021),
    software: str = "tinfeed tests",
    signature: bytes = b"LASF",
) -> Path:
    """Write a LAS file and return its path.

    Args:
        points: One dict per record with x, y, z and optional record
            fields (intensity, return_number, classification, withheld, ...).
        bounds: (minx, miny, minz, maxx, maxy, maxz); computed from the
            points when omitted.
    """
    points = points or []
    vlrs = vlrs or []
    if header_size is None:
        header_size = _HEADER_SIZES[version[1]]
    record_length = _RECORD_LENGTHS[point_format]

    if bounds is None:
        if points:
            xs = [p["x"] for p in points]
            ys = [p["y"] for p in points]
            zs = [p["z"] for p in points]
            bounds = (min(xs), min(ys), min(zs), max(xs), max(ys), max(zs))
        else:
            bounds = (0.0,) * 6
    minx, miny, minz, maxx, maxy, maxz = bounds

    vlr_bytes = b""
    for user_id, record_id, payload in vlrs:
        vlr_bytes += _VLR_HEADER.pack(
            0, user_id.encode("ascii"), record_id, len(payload), b"test record"
        )
        vlr_bytes += payload
    offset_to_points = header_size + len(vlr_bytes)

    n = len(points)
    legacy = n if legacy_count is None else legacy_count
    by_return = [0] * 5
    for p in points:
        rn = p.get("return_number", 1)
        if 1 <= rn <= 5:
            by_return[rn - 1] += 1

    format_byte = point_format | (0x80 if compressed else 0)
    header = _LAS_HEADER.pack(
        signature, 7, global_encoding, b"\x00" * 16,
        version[0], version[1],
        b"TEST SYSTEM", software.encode("ascii"),
        creation[0], creation[1],
        header_size, offset_to_points, len(vlrs),
        format_byte, record_length, legacy, *by_return,
        *scale, *offset,
        maxx, minx, maxy, miny, maxz, minz,
    )
    if header_size >= 235:
        header += struct.pack("<Q", 0)
    if header_size >= 375:
        count = n if extended_count is None else extended_count
        header += struct.pack("<QIQ", 0, 0, count)
        header += struct.pack("<15Q", *(by_return + [0] * 10))
    header = header.ljust(header_size, b"\x00")[:header_size]

    body = b"".join(_encode_record(point_format, p, scale, offset) for p in points)
    path.write_bytes(header + vlr_bytes + body)
    return path


def geokey_payload(keys: list[tuple[int, int, int, int]]) -> bytes:
    """GeoKeyDirectory VLR payload for (key, location, count, value) entries."""
    shorts = [1, 1, 0, len(keys)]
    for entry in keys:
        shorts.extend(entry)
    return struct.pack(f"<{len(shorts)}H", *shorts)


def build_dbf(
    path: Path,
    fields: list[tuple[str, str, int, int]],
    records: list[list[str]],
    *,
    deleted: frozenset[int] = frozenset(),
    version: int = 0x03,
) -> Path:
    """Write a dBASE III table.

    Args:
        fields: (name, type letter, length, decimal count) per field.
        records: Cell text per record; numeric cells are right-aligned,
            others left-aligned, both padded with blanks.
        deleted: Zero-based indices of records flagged as deleted.
    """
    header_length = 32 + 32 * len(fields) + 1
    record_length = 1 + sum(f[2] for f in fields)
    out = struct.pack(
        "<BBBBIHH20x", version, 121, 3, 14, len(records), header_length, record_length
    )
    for name, type_code, length, decimals in fields:
        out += struct.pack(
            "<11scIBB14x", name.encode("ascii"), type_code.encode("ascii"), 0, length, decimals
        )
    out += b"\x0d"
    for i, cells in enumerate(records):
        out += b"*" if i in deleted else b" "
        for (_, type_code, length, _), cell in zip(fields, cells):
            raw = cell.encode("latin-1")[:length]
            if type_code in ("N", "F"):
                out += raw.rjust(length, b" ")
            else:
                out += raw.ljust(length, b" ")
    out += b"\x1a"
    path.write_bytes(out)
    return path


@pytest.fixture
def las_factory(tmp_path):
    """Build LAS files in a temporary directory: ``las_factory(name, points, **kw)``."""

    def make(name: str = "test.las", points: list[dict] | None = None, **kwargs) -> Path:
        return build_las(tmp_path / name, points, **kwargs)

    return make


@pytest.fixture
def dbf_factory(tmp_path):
    """Build DBF files in a temporary directory: ``dbf_factory(name, fields, records)``."""

    def make(name: str, fields, records, **kwargs) -> Path:
        return build_dbf(tmp_path / name, fields, records, **kwargs)

    return make


@pytest.fixture
def geokeys():
    return geokey_payload


@pytest.fixture
def sample_points() -> list[dict]:
    """Five records with mixed returns and classes."""
    return [
        {"x": 100.0, "y": 200.0, "z": 10.0, "intensity": 120, "classification": 2,
         "return_number": 1, "number_of_returns": 2, "gps_time": 1000.5},
        {"x": 101.5, "y": 201.25, "z": 11.5, "intensity": 80, "classification": 5,
         "return_number": 2, "number_of_returns": 2, "gps_time": 1000.75},
        {"x": 102.0, "y": 202.0, "z": 9.0, "intensity": 200, "classification": 2,
         "return_number": 1, "number_of_returns": 1, "gps_time": 1001.0},
        {"x": 103.0, "y": 199.5, "z": 12.25, "intensity": 50, "classification": 7,
         "return_number": 1, "number_of_returns": 1, "gps_time": 1001.5},
        {"x": 104.0, "y": 203.0, "z": 8.5, "intensity": 10, "classification": 2,
         "return_number": 1, "number_of_returns": 1, "gps_time": 1002.0,
         "withheld": True},
    ]
