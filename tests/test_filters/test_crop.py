"""Tests for the crop filter."""

import pytest

from tinfeed.core.bounds import Bounds
from tinfeed.filters.crop import CropFilter, _parse_bounds
from tinfeed.io.las import LasPoint


class TestParseBounds:
    def test_2d(self):
        pairs = _parse_bounds("([0, 100], [0, 200])")
        assert len(pairs) == 2
        assert pairs[0] == (0.0, 100.0)
        assert pairs[1] == (0.0, 200.0)

    def test_3d(self):
        pairs = _parse_bounds("([0, 100], [0, 200], [10, 50])")
        assert len(pairs) == 3
        assert pairs[2] == (10.0, 50.0)

    def test_with_spaces(self):
        pairs = _parse_bounds("( [ 0 , 100 ] , [ 0 , 200 ] )")
        assert pairs[0] == (0.0, 100.0)

    def test_invalid_raises(self):
        with pytest.raises(ValueError, match="Invalid bounds"):
            _parse_bounds("not valid")


class TestCropFilter:
    def test_2d_crop(self):
        f = CropFilter(bounds="([0, 100], [0, 100])")
        kept = [
            f.accept(LasPoint(x=v, y=v, z=1e6)) for v in (0.0, 50.0, 100.0, 150.0)
        ]
        assert kept == [True, True, True, False]

    def test_3d_crop(self):
        f = CropFilter(bounds="([0, 100], [0, 100], [10, 30])")
        kept = [f.accept(LasPoint(x=50.0, y=50.0, z=z)) for z in (5.0, 25.0, 45.0)]
        assert kept == [False, True, False]

    def test_explicit_bounds(self):
        f = CropFilter(minx=10, maxx=90, miny=10, maxy=90)
        assert f.accept(LasPoint(x=50.0, y=50.0))
        assert not f.accept(LasPoint(x=0.0, y=50.0))

    def test_bounds_instance(self):
        box = Bounds(0, 0, 0, 1, 1, 1)
        f = CropFilter(bounds=box)
        assert f.bounds is box
        assert not f.accept(LasPoint(x=0.5, y=0.5, z=2.0))

    def test_missing_bounds_raises(self):
        with pytest.raises(ValueError, match="bounds"):
            CropFilter()

    def test_type_name(self):
        assert CropFilter.type_name() == "filters.crop"
