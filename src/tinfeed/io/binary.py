"""Seekable little-endian byte-record reader over a binary file."""

from __future__ import annotations

import struct
from pathlib import Path

from tinfeed.errors import FormatError, StateError

_U8 = struct.Struct("<B")
_I16 = struct.Struct("<h")
_U16 = struct.Struct("<H")
_I32 = struct.Struct("<i")
_U32 = struct.Struct("<I")
_I64 = struct.Struct("<q")
_F32 = struct.Struct("<f")
_F64 = struct.Struct("<d")
_I32_BE = struct.Struct(">i")


class ByteRecordReader:
    """Random-access reader for fixed-width little-endian fields.

    Wraps a file opened in binary mode with Python's own buffering. All
    multi-byte reads are little-endian except `read_int_big_endian`, which
    exists for the big-endian integers in Shapefile headers.

    A reader owns its file handle. The seek position is shared state, so
    one instance must not be used from several threads at once.

    Examples:
        >>> with ByteRecordReader("points.las") as r:
        ...     r.read_ascii(4)
        'LASF'
    """

    def __init__(self, path: str | Path, buffer_size: int = 64 * 1024) -> None:
        self._path = str(path)
        self._file = open(path, "rb", buffering=buffer_size)
        self._file_size = Path(path).stat().st_size

    # ── Properties ──────────────────────────────────────────────────

    @property
    def path(self) -> str:
        return self._path

    @property
    def file_size(self) -> int:
        """Size of the underlying file in bytes."""
        return self._file_size

    @property
    def closed(self) -> bool:
        return self._file.closed

    @property
    def position(self) -> int:
        """Current byte offset from the start of the file."""
        self._check_open()
        return self._file.tell()

    # ── Positioning ─────────────────────────────────────────────────

    def seek(self, position: int) -> None:
        """Move to an absolute byte offset."""
        self._check_open()
        if position < 0:
            raise ValueError(f"Negative file position {position}")
        self._file.seek(position)

    def skip_bytes(self, n: int) -> None:
        """Advance the position by n bytes without reading them."""
        self._check_open()
        self._file.seek(n, 1)

    # ── Reads ───────────────────────────────────────────────────────

    def read_bytes(self, n: int) -> bytes:
        """Read exactly n bytes."""
        self._check_open()
        data = self._file.read(n)
        if len(data) < n:
            raise FormatError(
                f"Unexpected end of file at offset {self._file.tell()}, "
                f"{n} bytes requested, {len(data)} available",
                path=self._path,
            )
        return data

    def read_into(self, buffer: bytearray | memoryview) -> None:
        """Fill a caller-owned buffer completely from the current position."""
        self._check_open()
        n = self._file.readinto(buffer)
        if n < len(buffer):
            raise FormatError(
                f"Unexpected end of file at offset {self._file.tell()}, "
                f"{len(buffer)} bytes requested, {n} available",
                path=self._path,
            )

    def read_ascii(self, n: int) -> str:
        """Read an n-byte fixed-length text field.

        The text ends at the first NUL byte; trailing blanks are removed.
        """
        raw = self.read_bytes(n)
        end = raw.find(b"\x00")
        if end >= 0:
            raw = raw[:end]
        return raw.decode("latin-1").rstrip(" ")

    def read_unsigned_byte(self) -> int:
        return _U8.unpack(self.read_bytes(1))[0]

    def read_short(self) -> int:
        return _I16.unpack(self.read_bytes(2))[0]

    def read_unsigned_short(self) -> int:
        return _U16.unpack(self.read_bytes(2))[0]

    def read_int(self) -> int:
        return _I32.unpack(self.read_bytes(4))[0]

    def read_unsigned_int(self) -> int:
        return _U32.unpack(self.read_bytes(4))[0]

    def read_long(self) -> int:
        return _I64.unpack(self.read_bytes(8))[0]

    def read_float(self) -> float:
        return _F32.unpack(self.read_bytes(4))[0]

    def read_double(self) -> float:
        return _F64.unpack(self.read_bytes(8))[0]

    def read_int_big_endian(self) -> int:
        return _I32_BE.unpack(self.read_bytes(4))[0]

    # ── Lifecycle ───────────────────────────────────────────────────

    def close(self) -> None:
        """Close the file. Further operations raise StateError."""
        self._file.close()

    def _check_open(self) -> None:
        if self._file.closed:
            raise StateError(f"Reader for {self._path} is closed")

    def __enter__(self) -> ByteRecordReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"pos={self._file.tell()}"
        return f"ByteRecordReader({self._path!r}, {state})"
