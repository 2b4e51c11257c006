"""Tests for geographic transforms and linear units."""

import pytest

from tinfeed.core.transform import GeographicRescale, SimpleGeographicTransform
from tinfeed.core.units import LinearUnits


class TestLinearUnits:
    @pytest.mark.parametrize("code,unit", [
        (9001, LinearUnits.METERS),
        (9002, LinearUnits.FEET),
        (9003, LinearUnits.FEET),
        (9006, LinearUnits.FEET),
        (9014, LinearUnits.FATHOMS),
        (9007, LinearUnits.UNKNOWN),
        (None, LinearUnits.UNKNOWN),
    ])
    def test_from_unit_code(self, code, unit):
        assert LinearUnits.from_unit_code(code) is unit

    def test_to_meters(self):
        assert LinearUnits.FEET.to_meters_value(10.0) == pytest.approx(3.048)
        assert LinearUnits.UNKNOWN.to_meters_value(10.0) == 10.0


class TestSimpleGeographicTransform:
    def test_center_maps_to_origin(self):
        t = SimpleGeographicTransform(42.0, -70.0)
        assert t.forward(-70.0, 42.0) == (0.0, 0.0)

    def test_equator_degree(self):
        t = SimpleGeographicTransform(0.0, 0.0)
        x, y = t.forward(1.0, 1.0)
        # one degree of arc on the WGS-84 equator
        assert x == pytest.approx(111319.49, rel=1e-6)
        assert y == pytest.approx(111319.49, rel=1e-6)

    def test_feet(self):
        meters = SimpleGeographicTransform(30.0, 10.0)
        feet = SimpleGeographicTransform(30.0, 10.0, units=LinearUnits.FEET)
        mx, my = meters.forward(10.5, 30.5)
        fx, fy = feet.forward(10.5, 30.5)
        assert fx == pytest.approx(mx / 0.3048)
        assert fy == pytest.approx(my / 0.3048)

    def test_inverse(self):
        t = SimpleGeographicTransform(-33.9, 151.2)
        lon, lat = t.inverse(*t.forward(151.25, -33.85))
        assert lon == pytest.approx(151.25)
        assert lat == pytest.approx(-33.85)

    def test_center_latitude_limit(self):
        SimpleGeographicTransform(87.5, 0.0)
        with pytest.raises(ValueError, match="87.5"):
            SimpleGeographicTransform(88.0, 0.0)

    def test_pole_rejected(self):
        t = SimpleGeographicTransform(85.0, 0.0)
        with pytest.raises(ValueError, match="pole"):
            t.forward(0.0, 89.5)

    def test_repr(self):
        assert "units=meters" in repr(SimpleGeographicTransform(1.0, 2.0))


class TestGeographicRescale:
    def test_forward(self):
        r = GeographicRescale(scale_x=10.0, scale_y=20.0, offset_x=1.0, offset_y=2.0)
        assert r.forward(2.0, 3.0) == (10.0, 20.0)

    def test_identity_default(self):
        assert GeographicRescale().forward(5.0, 6.0) == (5.0, 6.0)

    def test_matches_transform(self):
        t = SimpleGeographicTransform(45.0, 7.0)
        r = GeographicRescale.from_transform(t)
        assert r.forward(7.1, 45.2) == pytest.approx(t.forward(7.1, 45.2))
