"""Tests for GeoTIFF key parsing and lookup."""

import numpy as np

from tinfeed.io.geotiff import (
    GeoKey,
    GeoKeyEntry,
    GeoTiffData,
    GtModelType,
    parse_key_entries,
)
from tinfeed.utils.crs import crs_from_geotiff, epsg_code_from_geotiff


def _gtd(entries, doubles=None, ascii_text=None):
    return GeoTiffData([GeoKeyEntry(*e) for e in entries], doubles, ascii_text)


class TestParseKeyEntries:
    def test_groups_of_four(self):
        shorts = np.array([1024, 0, 1, 2, 3076, 0, 1, 9001], dtype=np.uint16)
        entries = parse_key_entries(shorts)
        assert entries == [GeoKeyEntry(1024, 0, 1, 2), GeoKeyEntry(3076, 0, 1, 9001)]
        assert entries[0].key is GeoKey.GTModelTypeGeoKey

    def test_partial_entry_dropped(self):
        entries = parse_key_entries(np.array([1024, 0, 1, 2, 5, 6], dtype=np.uint16))
        assert len(entries) == 1

    def test_unknown_key_code(self):
        assert GeoKeyEntry(60000, 0, 1, 0).key is None


class TestGeoTiffData:
    def test_integer(self):
        gtd = _gtd([(1024, 0, 1, 1), (3072, 0, 1, 32633)])
        assert gtd.contains_key(GeoKey.ProjectedCSTypeGeoKey)
        assert gtd.get_integer(3072) == 32633
        assert gtd.get_integer(2048) is None
        assert gtd.model_type is GtModelType.PROJECTED

    def test_first_entry_wins(self):
        gtd = _gtd([(1024, 0, 1, 2), (1024, 0, 1, 1)])
        assert gtd.model_type is GtModelType.GEOGRAPHIC
        assert len(gtd.key_list) == 2

    def test_integer_rejects_param_storage(self):
        gtd = _gtd([(3078, 34736, 1, 0)], doubles=np.array([45.0]))
        assert gtd.get_integer(3078) is None

    def test_double(self):
        gtd = _gtd([(3078, 34736, 2, 1)], doubles=np.array([0.0, 45.5, 50.25]))
        np.testing.assert_array_equal(gtd.get_double(3078), [45.5, 50.25])

    def test_double_out_of_range(self):
        gtd = _gtd([(3078, 34736, 4, 1)], doubles=np.array([0.0, 1.0]))
        assert gtd.get_double(3078) is None

    def test_double_without_block(self):
        gtd = _gtd([(3078, 34736, 1, 0)])
        assert gtd.get_double(3078) is None

    def test_string_offsets(self):
        text = "WGS 84|NAD83 / UTM zone 10N|"
        gtd = _gtd([(2049, 34737, 7, 0), (3073, 34737, 21, 7)], ascii_text=text)
        assert gtd.get_string(2049) == "WGS 84"
        assert gtd.get_string(3073) == "NAD83 / UTM zone 10N"

    def test_model_type_absent(self):
        assert _gtd([]).model_type is GtModelType.UNKNOWN

    def test_model_type_codes(self):
        assert GtModelType.from_code(3) is GtModelType.GEOCENTRIC
        assert GtModelType.from_code(7) is GtModelType.UNKNOWN
        assert GtModelType.from_code(None) is GtModelType.UNKNOWN


class TestCrsFromGeoTiff:
    def test_projected_preferred(self):
        gtd = _gtd([(2048, 0, 1, 4326), (3072, 0, 1, 32610)])
        assert epsg_code_from_geotiff(gtd) == 32610

    def test_geographic(self):
        gtd = _gtd([(2048, 0, 1, 4326)])
        assert crs_from_geotiff(gtd).to_epsg() == 4326

    def test_user_defined(self):
        gtd = _gtd([(3072, 0, 1, 32767)])
        assert epsg_code_from_geotiff(gtd) is None
        assert crs_from_geotiff(gtd) is None

    def test_none(self):
        assert crs_from_geotiff(None) is None
