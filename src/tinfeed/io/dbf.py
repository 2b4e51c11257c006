"""DBF (dBASE III) attribute tables paired with Shapefiles."""

from __future__ import annotations

import logging
import math
import struct
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Union

from tinfeed.errors import FormatError
from tinfeed.io.binary import ByteRecordReader

logger = logging.getLogger(__name__)

DbfValue = Union[str, int, float, bool, datetime, None]

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_DESCRIPTOR_SIZE = 32
_FIELD_TERMINATOR = 0x0D
_DELETED_FLAG = ord("*")

_BLANK = 0x20
_DIGITS = range(0x30, 0x3A)
_DECIMAL_MARKS = (ord("."), ord(","))
_EXPONENT_MARKS = (ord("e"), ord("E"))
_MAX_DECIMAL_EXPONENT = 400
_TRUE_MARKS = frozenset(b"YyTt")
_FALSE_MARKS = frozenset(b"NnFf")


def scan_double(raw: bytes) -> float:
    """Parse a fixed-width DBF numeric cell.

    Accepts leading blanks, an optional sign or a leading decimal point,
    integer digits, a fractional part introduced by ``.`` or ``,``, and
    an optional ``e``/``E`` exponent with its own sign. A blank ends the
    number. Anything unexpected, and a cell of only blanks, gives NaN.

    The whole cell is always supplied by the caller, so a bad cell never
    disturbs the position of the following fields.

    Examples:
        >>> scan_double(b"  123.45")
        123.45
        >>> scan_double(b" -0.5E2")
        -50.0
        >>> scan_double(b"12X")
        nan
    """
    n = len(raw)
    i = 0
    while i < n and raw[i] == _BLANK:
        i += 1
    if i == n:
        return math.nan

    sign = 1
    if raw[i] == ord("-"):
        sign = -1
        i += 1
    elif raw[i] == ord("+"):
        i += 1

    # integer part
    whole = 0
    n_digits = 0
    while i < n and raw[i] in _DIGITS:
        whole = whole * 10 + (raw[i] - 0x30)
        n_digits += 1
        i += 1

    # fractional part
    frac = 0
    divisor = 1
    if i < n and raw[i] in _DECIMAL_MARKS:
        i += 1
        while i < n and raw[i] in _DIGITS:
            frac = frac * 10 + (raw[i] - 0x30)
            divisor *= 10
            n_digits += 1
            i += 1
    if n_digits == 0:
        return math.nan

    exponent = 0
    if i < n and raw[i] in _EXPONENT_MARKS:
        i += 1
        exp_sign = 1
        if i < n and raw[i] in (ord("-"), ord("+")):
            exp_sign = -1 if raw[i] == ord("-") else 1
            i += 1
        n_exp_digits = 0
        while i < n and raw[i] in _DIGITS:
            exponent = exponent * 10 + (raw[i] - 0x30)
            n_exp_digits += 1
            i += 1
        if n_exp_digits == 0:
            return math.nan
        exponent *= exp_sign

    # only blanks may follow the number
    while i < n:
        if raw[i] != _BLANK:
            return math.nan
        i += 1

    # exact integer arithmetic, one correctly rounded division
    numerator = sign * (whole * divisor + frac)
    # past this the result is inf or 0 and the powers only grow
    limit = _MAX_DECIMAL_EXPONENT + n_digits
    exponent = max(-limit, min(exponent, limit))
    if exponent >= 0:
        try:
            return numerator * 10**exponent / divisor
        except OverflowError:
            return sign * math.inf
    return numerator / (divisor * 10**-exponent)


def clamp_to_int32(value: float) -> int:
    """Truncate a float to a 32-bit integer, saturating; NaN gives 0."""
    if math.isnan(value):
        return 0
    if value >= _INT32_MAX:
        return _INT32_MAX
    if value <= _INT32_MIN:
        return _INT32_MIN
    return int(value)


class DbfFieldKind(Enum):
    """Decoding behaviour of a field, chosen from its type code."""

    CHARACTER = "character"
    INTEGER = "integer"
    DOUBLE = "double"
    LOGICAL = "logical"
    DATE = "date"

    @classmethod
    def from_type_code(cls, type_code: str, decimal_count: int) -> DbfFieldKind:
        if type_code == "F" or (type_code == "N" and decimal_count > 0):
            return cls.DOUBLE
        if type_code == "N":
            return cls.INTEGER
        if type_code == "L":
            return cls.LOGICAL
        if type_code == "D":
            return cls.DATE
        return cls.CHARACTER


@dataclass(frozen=True)
class DbfField:
    """Field descriptor with decoders for the field's cells.

    Each decoder takes the raw bytes of one cell (exactly `length` bytes).

    Attributes:
        name: Field name, at most 10 characters.
        type_code: dBASE type letter (C, N, F, L, D, ...).
        data_address: Unused by dBASE III; kept as read.
        length: Cell width in bytes.
        decimal_count: Digits after the decimal point for numeric fields.
        offset: Position of the cell within a record. The first field is
            at 1, after the deletion flag.
    """

    name: str
    type_code: str
    data_address: int
    length: int
    decimal_count: int
    offset: int
    encoding: str = "utf-8"
    kind: DbfFieldKind = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "kind", DbfFieldKind.from_type_code(self.type_code, self.decimal_count)
        )

    @classmethod
    def from_descriptor(
        cls, raw: bytes, offset: int, encoding: str = "utf-8"
    ) -> DbfField:
        """Build a field from a 32-byte descriptor.

        Layout: 11-byte NUL-padded name, 1-byte type, 4-byte data
        address, 1-byte length, 1-byte decimal count, 14 reserved bytes.
        """
        name = raw[:11].split(b"\x00", 1)[0].decode("ascii", errors="replace").strip()
        type_code = chr(raw[11])
        (data_address,) = struct.unpack_from("<i", raw, 12)
        return cls(
            name=name,
            type_code=type_code,
            data_address=data_address,
            length=raw[16],
            decimal_count=raw[17],
            offset=offset,
            encoding=encoding,
        )

    @property
    def is_numeric(self) -> bool:
        return self.kind in (DbfFieldKind.INTEGER, DbfFieldKind.DOUBLE)

    @property
    def is_integral(self) -> bool:
        return self.kind is DbfFieldKind.INTEGER

    # ── Cell decoders ───────────────────────────────────────────────

    def decode(self, raw: bytes) -> DbfValue:
        """Decode a cell to the natural Python value for the field kind.

        Character cells give str, integer cells int (None when blank),
        double cells float (NaN when blank or malformed), logical cells
        bool (None when neither true nor false), date cells a UTC
        datetime (None when blank or invalid).
        """
        kind = self.kind
        if kind is DbfFieldKind.CHARACTER:
            return self.decode_string(raw)
        if kind is DbfFieldKind.INTEGER:
            if not raw.strip():
                return None
            return self.decode_integer(raw)
        if kind is DbfFieldKind.DOUBLE:
            return self.decode_double(raw)
        if kind is DbfFieldKind.LOGICAL:
            return self._logical(raw)
        return self.decode_date(raw)

    def decode_string(self, raw: bytes) -> str:
        """Cell text. Numeric cells are stripped on both sides, others
        only on the right."""
        text = raw.decode(self.encoding, errors="replace")
        if self.is_numeric:
            return text.strip()
        return text.rstrip()

    def decode_double(self, raw: bytes) -> float:
        if self.is_numeric:
            return scan_double(raw)
        return math.nan

    def decode_integer(self, raw: bytes) -> int:
        """Integer value of a cell.

        Overflow markers (``*``) and unparsable cells give 0. Double
        fields are truncated and clamped to the 32-bit range.
        """
        if self.kind is DbfFieldKind.INTEGER:
            text = raw.strip()
            if not text or text.startswith(b"*"):
                return 0
            try:
                return int(text)
            except ValueError:
                return clamp_to_int32(scan_double(raw))
        if self.kind is DbfFieldKind.DOUBLE:
            return clamp_to_int32(scan_double(raw))
        return 0

    def decode_logical(self, raw: bytes) -> bool:
        """Truth value of a logical cell; False for every other kind."""
        return self._logical(raw) is True

    def decode_date(self, raw: bytes) -> datetime | None:
        if self.kind is not DbfFieldKind.DATE:
            return None
        text = raw.strip()
        if len(text) != 8 or not text.isdigit():
            return None
        try:
            return datetime(
                int(text[:4]), int(text[4:6]), int(text[6:8]), tzinfo=timezone.utc
            )
        except ValueError:
            return None

    def _logical(self, raw: bytes) -> bool | None:
        if self.kind is not DbfFieldKind.LOGICAL:
            return False
        for b in raw:
            if b in _TRUE_MARKS:
                return True
            if b in _FALSE_MARKS:
                return False
        return None

    def __repr__(self) -> str:
        return f"DbfField({self.type_code}) {self.name}"


class DbfFileReader:
    """Random-access reader for a DBF attribute table.

    Records are numbered from 1, matching Shapefile record numbers.

    Args:
        path: Path to a .dbf file.
        encoding: Text encoding of character cells.

    Raises:
        FormatError: The version byte is not a dBASE III variant or the
            header is truncated.
    """

    def __init__(self, path: str | Path, encoding: str = "utf-8") -> None:
        self._path = str(path)
        self._encoding = encoding
        self._reader = ByteRecordReader(path)
        try:
            self._read_header()
        except Exception:
            self._reader.close()
            raise
        logger.info(
            "Opened %s: %d records, %d fields",
            self._path, self.record_count, len(self._fields),
        )

    def _read_header(self) -> None:
        r = self._reader
        self.version = r.read_unsigned_byte()
        if self.version & 0x03 != 0x03:
            raise FormatError(
                f"Unsupported DBF version byte 0x{self.version:02x}", path=self._path
            )
        yy, mm, dd = r.read_unsigned_byte(), r.read_unsigned_byte(), r.read_unsigned_byte()
        try:
            self.last_update: datetime | None = datetime(
                1900 + yy, mm, dd, tzinfo=timezone.utc
            )
        except ValueError:
            self.last_update = None
        self.record_count = r.read_unsigned_int()
        self.header_length = r.read_unsigned_short()
        self.record_length = r.read_unsigned_short()

        n_fields = (self.header_length - _DESCRIPTOR_SIZE - 1) // _DESCRIPTOR_SIZE
        fields: list[DbfField] = []
        offset = 1
        for i in range(n_fields):
            r.seek(_DESCRIPTOR_SIZE + i * _DESCRIPTOR_SIZE)
            raw = r.read_bytes(_DESCRIPTOR_SIZE)
            if raw[0] == _FIELD_TERMINATOR:
                break
            f = DbfField.from_descriptor(raw, offset, self._encoding)
            logger.debug("DBF field %r, length %d, offset %d", f, f.length, offset)
            fields.append(f)
            offset += f.length
        if offset > self.record_length:
            logger.warning(
                "%s: fields span %d bytes but records are %d bytes",
                self._path, offset, self.record_length,
            )
        self._fields = fields

    # ── Fields ──────────────────────────────────────────────────────

    @property
    def path(self) -> str:
        return self._path

    @property
    def fields(self) -> list[DbfField]:
        return list(self._fields)

    def get_field_by_name(self, name: str) -> DbfField | None:
        """Look up a field by exact name, then case-insensitively."""
        for f in self._fields:
            if f.name == name:
                return f
        lowered = name.lower()
        for f in self._fields:
            if f.name.lower() == lowered:
                return f
        return None

    def _resolve(self, field_or_name: DbfField | str) -> DbfField:
        if isinstance(field_or_name, DbfField):
            return field_or_name
        f = self.get_field_by_name(field_or_name)
        if f is None:
            raise KeyError(
                f"No field '{field_or_name}' in {self._path}. "
                f"Available: {[f.name for f in self._fields]}"
            )
        return f

    # ── Records ─────────────────────────────────────────────────────

    def _record_position(self, record_number: int) -> int:
        if record_number < 1 or record_number > self.record_count:
            raise FormatError(
                f"Record number out of range [1, {self.record_count}]",
                path=self._path, record=record_number,
            )
        return self.header_length + (record_number - 1) * self.record_length

    def read_cell(self, record_number: int, field_or_name: DbfField | str) -> bytes:
        """Raw bytes of one cell."""
        f = self._resolve(field_or_name)
        position = self._record_position(record_number)
        self._reader.seek(position + f.offset)
        try:
            return self._reader.read_bytes(f.length)
        except FormatError as e:
            raise FormatError(e.message, path=self._path, record=record_number) from e

    def read_field(self, record_number: int, field_or_name: DbfField | str) -> DbfValue:
        """Decoded value of one cell (see `DbfField.decode`).

        Args:
            record_number: 1-based record number.
            field_or_name: A field of this table or its name.
        """
        f = self._resolve(field_or_name)
        return f.decode(self.read_cell(record_number, f))

    def read_double(self, record_number: int, field_or_name: DbfField | str) -> float:
        f = self._resolve(field_or_name)
        return f.decode_double(self.read_cell(record_number, f))

    def read_integer(self, record_number: int, field_or_name: DbfField | str) -> int:
        f = self._resolve(field_or_name)
        return f.decode_integer(self.read_cell(record_number, f))

    def read_string(self, record_number: int, field_or_name: DbfField | str) -> str:
        f = self._resolve(field_or_name)
        return f.decode_string(self.read_cell(record_number, f))

    def read_logical(self, record_number: int, field_or_name: DbfField | str) -> bool:
        f = self._resolve(field_or_name)
        return f.decode_logical(self.read_cell(record_number, f))

    def read_record(self, record_number: int) -> dict[str, DbfValue]:
        """All cells of one record keyed by field name."""
        position = self._record_position(record_number)
        self._reader.seek(position)
        try:
            raw = self._reader.read_bytes(self.record_length)
        except FormatError as e:
            raise FormatError(e.message, path=self._path, record=record_number) from e
        return {
            f.name: f.decode(raw[f.offset:f.offset + f.length]) for f in self._fields
        }

    def is_deleted(self, record_number: int) -> bool:
        self._reader.seek(self._record_position(record_number))
        return self._reader.read_unsigned_byte() == _DELETED_FLAG

    def unique_values(self, field_or_name: DbfField | str) -> list[Any]:
        """Distinct non-null values of a field, sorted."""
        f = self._resolve(field_or_name)
        values = set()
        for record_number in range(1, self.record_count + 1):
            value = self.read_field(record_number, f)
            if value is None or (isinstance(value, float) and math.isnan(value)):
                continue
            values.add(value)
        return sorted(values)

    # ── Lifecycle ───────────────────────────────────────────────────

    def close(self) -> None:
        self._reader.close()

    @property
    def closed(self) -> bool:
        return self._reader.closed

    def __enter__(self) -> DbfFileReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"DbfFileReader({self._path!r}, records={self.record_count})"
