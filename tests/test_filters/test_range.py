"""Tests for the range filter."""

import pytest

from tinfeed.filters.range import RangeFilter, _parse_range_expr
from tinfeed.io.las import LasPoint


def _point(**fields) -> LasPoint:
    return LasPoint(**fields)


class TestParseRangeExpr:
    def test_exact_match(self):
        attr, neg, lo, hi = _parse_range_expr("Classification[2:2]")
        assert attr == "classification"
        assert neg is False
        assert lo == 2.0
        assert hi == 2.0

    def test_range(self):
        attr, neg, lo, hi = _parse_range_expr("Z[100:500]")
        assert attr == "z"
        assert lo == 100.0
        assert hi == 500.0

    def test_min_only(self):
        attr, neg, lo, hi = _parse_range_expr("Z[100:]")
        assert lo == 100.0
        assert hi is None

    def test_max_only(self):
        attr, neg, lo, hi = _parse_range_expr("Z[:500]")
        assert lo is None
        assert hi == 500.0

    def test_negation(self):
        attr, neg, lo, hi = _parse_range_expr("Classification![7:7]")
        assert neg is True
        assert lo == 7.0

    def test_invalid_raises(self):
        with pytest.raises(ValueError, match="Invalid range"):
            _parse_range_expr("badformat")

    def test_unknown_dimension_raises(self):
        with pytest.raises(KeyError, match="NonExistent"):
            _parse_range_expr("NonExistent[0:1]")


class TestRangeFilter:
    def test_exact_classification(self):
        f = RangeFilter(limits="Classification[2:2]")
        assert f.accept(_point(classification=2))
        assert not f.accept(_point(classification=3))

    def test_range_z(self):
        f = RangeFilter(limits="Z[200:400]")
        assert f.accept(_point(z=200.0))
        assert f.accept(_point(z=400.0))
        assert not f.accept(_point(z=400.5))

    def test_negation(self):
        f = RangeFilter(limits="Classification![7:7]")
        assert f.accept(_point(classification=2))
        assert not f.accept(_point(classification=7))

    def test_multiple_conditions(self):
        f = RangeFilter(limits="Classification[2:2],Z[200:400]")
        assert f.accept(_point(classification=2, z=300.0))
        assert not f.accept(_point(classification=2, z=100.0))
        assert not f.accept(_point(classification=5, z=300.0))

    def test_missing_attribute_fails(self):
        f = RangeFilter(limits="GpsTime[0:]")
        assert not f.accept(_point(gps_time=None))
        assert f.accept(_point(gps_time=12.0))
        assert RangeFilter(limits="GpsTime![0:10]").accept(_point(gps_time=None))

    def test_missing_limits_raises(self):
        with pytest.raises(ValueError, match="limits"):
            RangeFilter()

    def test_missing_dimension_raises(self):
        with pytest.raises(KeyError, match="NonExistent"):
            RangeFilter(limits="NonExistent[0:1]")

    def test_type_name(self):
        assert RangeFilter.type_name() == "filters.range"
