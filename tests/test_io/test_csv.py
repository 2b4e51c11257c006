"""Tests for the delimited-text vertex reader."""

import pytest

from tinfeed.core.transform import GeographicRescale
from tinfeed.errors import FormatError
from tinfeed.io.csv import CsvVertexReader


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


class TestCsvVertexReader:
    def test_with_header(self, tmp_path):
        path = _write(tmp_path, "pts.csv", "X,Y,Z,Intensity\n1.5,2.5,3.5,100\n4,5,6,200\n")
        reader = CsvVertexReader()
        vertices = reader.read(path)
        assert [(v.x, v.y, v.z) for v in vertices] == [(1.5, 2.5, 3.5), (4.0, 5.0, 6.0)]
        assert [v.index for v in vertices] == [0, 1]
        assert reader.bounds.maxz == 6.0
        assert reader.metadata.record_count == 2
        assert reader.metadata.source_format == "csv"

    def test_reordered_columns(self, tmp_path):
        path = _write(tmp_path, "pts.csv", "id;z;y;x\n1;30;20;10\n")
        vertices = CsvVertexReader().read(path)
        assert (vertices[0].x, vertices[0].y, vertices[0].z) == (10.0, 20.0, 30.0)

    def test_headerless_whitespace(self, tmp_path):
        path = _write(tmp_path, "pts.xyz", "1 2 3\n4  5 6\n")
        vertices = CsvVertexReader().read(path)
        assert [(v.x, v.y, v.z) for v in vertices] == [(1.0, 2.0, 3.0), (4.0, 5.0, 6.0)]

    def test_headerless_tabs(self, tmp_path):
        path = _write(tmp_path, "pts.txt", "1\t2\t3\n")
        assert len(CsvVertexReader().read(path)) == 1

    def test_header_option(self, tmp_path):
        path = _write(tmp_path, "pts.csv", "7,8,9\n")
        vertices = CsvVertexReader().read(path, header="Z,Y,X")
        assert (vertices[0].x, vertices[0].z) == (9.0, 7.0)

    def test_skip(self, tmp_path):
        path = _write(tmp_path, "pts.csv", "# survey 12\nx,y,z\n1,2,3\n")
        vertices = CsvVertexReader().read(path, skip=1)
        assert len(vertices) == 1

    def test_transform(self, tmp_path):
        path = _write(tmp_path, "pts.csv", "x,y,z\n3,4,5\n")
        rescale = GeographicRescale(scale_x=2.0, scale_y=2.0, offset_x=1.0, offset_y=1.0)
        vertices = CsvVertexReader().read(path, transform=rescale)
        assert (vertices[0].x, vertices[0].y, vertices[0].z) == (4.0, 6.0, 5.0)

    def test_empty(self, tmp_path):
        path = _write(tmp_path, "pts.csv", "x,y,z\n")
        reader = CsvVertexReader()
        assert reader.read(path) == []
        assert reader.bounds is None

    def test_missing_column(self, tmp_path):
        path = _write(tmp_path, "pts.csv", "x,y,elev\n1,2,3\n")
        with pytest.raises(FormatError, match="'z'"):
            CsvVertexReader().read(path)

    def test_too_few_columns(self, tmp_path):
        path = _write(tmp_path, "pts.csv", "1,2\n3,4\n")
        with pytest.raises(FormatError, match="columns"):
            CsvVertexReader().read(path)

    def test_bad_number(self, tmp_path):
        path = _write(tmp_path, "pts.csv", "x,y,z\n1,2,abc\n")
        with pytest.raises(FormatError):
            CsvVertexReader().read(path)
