"""Tests for the little-endian byte record reader."""

import struct

import pytest

from tinfeed.errors import FormatError, StateError
from tinfeed.io.binary import ByteRecordReader


@pytest.fixture
def binary_file(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(
        struct.pack("<BhHiIqfd", 200, -2, 65000, -70000, 4000000000, -(2**40), 1.5, 2.25)
        + b"ABC \x00xyz"
        + struct.pack(">i", 9994)
    )
    return path


class TestByteRecordReader:
    def test_typed_reads(self, binary_file):
        with ByteRecordReader(binary_file) as r:
            assert r.read_unsigned_byte() == 200
            assert r.read_short() == -2
            assert r.read_unsigned_short() == 65000
            assert r.read_int() == -70000
            assert r.read_unsigned_int() == 4000000000
            assert r.read_long() == -(2**40)
            assert r.read_float() == 1.5
            assert r.read_double() == 2.25
            assert r.read_ascii(8) == "ABC"
            assert r.read_int_big_endian() == 9994

    def test_seek_and_position(self, binary_file):
        with ByteRecordReader(binary_file) as r:
            r.seek(3)
            assert r.position == 3
            assert r.read_unsigned_short() == 65000
            r.skip_bytes(4)
            assert r.position == 9
            assert r.read_unsigned_int() == 4000000000

    def test_file_size(self, binary_file):
        with ByteRecordReader(binary_file) as r:
            assert r.file_size == binary_file.stat().st_size

    def test_negative_seek(self, binary_file):
        with ByteRecordReader(binary_file) as r:
            with pytest.raises(ValueError):
                r.seek(-1)

    def test_short_read(self, binary_file):
        with ByteRecordReader(binary_file) as r:
            r.seek(r.file_size - 2)
            with pytest.raises(FormatError, match="Unexpected end of file"):
                r.read_int()

    def test_read_into(self, binary_file):
        buffer = bytearray(3)
        with ByteRecordReader(binary_file) as r:
            r.seek(1)
            r.read_into(buffer)
        assert bytes(buffer) == struct.pack("<hB", -2, 0xE8)

    def test_closed(self, binary_file):
        r = ByteRecordReader(binary_file)
        r.close()
        assert r.closed
        with pytest.raises(StateError):
            r.read_unsigned_byte()
        with pytest.raises(StateError):
            r.seek(0)
        assert "closed" in repr(r)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ByteRecordReader(tmp_path / "nope.bin")
