"""GeoTIFF key directory as embedded in LAS variable-length records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum

import numpy as np

logger = logging.getLogger(__name__)

# VLR record ids under the "LASF_Projection" user id
GEO_KEY_DIRECTORY_TAG = 34735
GEO_DOUBLE_PARAMS_TAG = 34736
GEO_ASCII_PARAMS_TAG = 34737
OGC_WKT_RECORD_ID = 2112


class GeoKey(IntEnum):
    """GeoTIFF key codes (GeoTIFF 1.0 section 6.2)."""

    GTModelTypeGeoKey = 1024
    GTRasterTypeGeoKey = 1025
    GTCitationGeoKey = 1026

    GeographicTypeGeoKey = 2048
    GeogCitationGeoKey = 2049
    GeogGeodeticDatumGeoKey = 2050
    GeogPrimeMeridianGeoKey = 2051
    GeogLinearUnitsGeoKey = 2052
    GeogLinearUnitSizeGeoKey = 2053
    GeogAngularUnitsGeoKey = 2054
    GeogAngularUnitSizeGeoKey = 2055
    GeogEllipsoidGeoKey = 2056
    GeogSemiMajorAxisGeoKey = 2057
    GeogSemiMinorAxisGeoKey = 2058
    GeogInvFlatteningGeoKey = 2059
    GeogAzimuthUnitsGeoKey = 2060
    GeogPrimeMeridianLongGeoKey = 2061
    GeogTOWGS84GeoKey = 2062

    ProjectedCSTypeGeoKey = 3072
    PCSCitationGeoKey = 3073
    ProjectionGeoKey = 3074
    ProjCoordTransGeoKey = 3075
    ProjLinearUnitsGeoKey = 3076
    ProjLinearUnitSizeGeoKey = 3077
    ProjStdParallel1GeoKey = 3078
    ProjStdParallel2GeoKey = 3079
    ProjNatOriginLongGeoKey = 3080
    ProjNatOriginLatGeoKey = 3081
    ProjFalseEastingGeoKey = 3082
    ProjFalseNorthingGeoKey = 3083
    ProjFalseOriginLongGeoKey = 3084
    ProjFalseOriginLatGeoKey = 3085
    ProjFalseOriginEastingGeoKey = 3086
    ProjFalseOriginNorthingGeoKey = 3087
    ProjCenterLongGeoKey = 3088
    ProjCenterLatGeoKey = 3089
    ProjCenterEastingGeoKey = 3090
    ProjCenterNorthingGeoKey = 3091
    ProjScaleAtNatOriginGeoKey = 3092
    ProjScaleAtCenterGeoKey = 3093
    ProjAzimuthAngleGeoKey = 3094
    ProjStraightVertPoleLongGeoKey = 3095

    VerticalCSTypeGeoKey = 4096
    VerticalCitationGeoKey = 4097
    VerticalDatumGeoKey = 4098
    VerticalUnitsGeoKey = 4099


class GtModelType(IntEnum):
    """Values of GTModelTypeGeoKey. UNKNOWN marks an absent key."""

    UNKNOWN = 0
    PROJECTED = 1
    GEOGRAPHIC = 2
    GEOCENTRIC = 3

    @classmethod
    def from_code(cls, code: int | None) -> GtModelType:
        if code == 1:
            return cls.PROJECTED
        if code == 2:
            return cls.GEOGRAPHIC
        if code == 3:
            return cls.GEOCENTRIC
        return cls.UNKNOWN


@dataclass(frozen=True)
class GeoKeyEntry:
    """One four-short entry of a GeoKeyDirectory.

    When `location` is 0 the value is stored directly in `value_or_offset`.
    Otherwise `location` names the tag holding the value (34736 for
    doubles, 34737 for ASCII) and `value_or_offset` is the index of the
    first element within that block.
    """

    key_code: int
    location: int
    count: int
    value_or_offset: int

    @property
    def key(self) -> GeoKey | None:
        try:
            return GeoKey(self.key_code)
        except ValueError:
            return None


class GeoTiffData:
    """GeoTIFF keys plus their optional double and ASCII parameter blocks.

    Accessors return None for an absent key or a key whose storage does
    not match the requested type; they never raise.
    """

    def __init__(
        self,
        keys: list[GeoKeyEntry],
        double_data: np.ndarray | None = None,
        ascii_data: str | None = None,
    ) -> None:
        self._keys = list(keys)
        self._by_code = {}
        for entry in self._keys:
            self._by_code.setdefault(entry.key_code, entry)
        self.double_data = double_data
        self.ascii_data = ascii_data

    @property
    def key_list(self) -> list[GeoKeyEntry]:
        return list(self._keys)

    def contains_key(self, key: int) -> bool:
        return int(key) in self._by_code

    def get_entry(self, key: int) -> GeoKeyEntry | None:
        return self._by_code.get(int(key))

    def get_integer(self, key: int) -> int | None:
        """Value of a key stored inline in the directory."""
        entry = self._by_code.get(int(key))
        if entry is None or entry.location != 0:
            return None
        return entry.value_or_offset

    def get_double(self, key: int) -> np.ndarray | None:
        """Values of a key stored in the double parameter block."""
        entry = self._by_code.get(int(key))
        if entry is None or entry.location != GEO_DOUBLE_PARAMS_TAG:
            return None
        if self.double_data is None:
            return None
        start = entry.value_or_offset
        stop = start + entry.count
        if stop > len(self.double_data):
            logger.warning(
                "GeoKey %d references doubles [%d:%d] beyond block of %d",
                entry.key_code, start, stop, len(self.double_data),
            )
            return None
        return self.double_data[start:stop].copy()

    def get_string(self, key: int) -> str | None:
        """Value of a key stored in the ASCII parameter block.

        GeoTIFF terminates each string with a pipe; it is removed.
        """
        entry = self._by_code.get(int(key))
        if entry is None or entry.location != GEO_ASCII_PARAMS_TAG:
            return None
        if self.ascii_data is None:
            return None
        start = entry.value_or_offset
        text = self.ascii_data[start:start + entry.count]
        nul = text.find("\x00")
        if nul >= 0:
            text = text[:nul]
        return text.rstrip("|")

    @property
    def model_type(self) -> GtModelType:
        return GtModelType.from_code(self.get_integer(GeoKey.GTModelTypeGeoKey))

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return (
            f"GeoTiffData(keys={len(self._keys)}, "
            f"doubles={0 if self.double_data is None else len(self.double_data)}, "
            f"ascii={0 if self.ascii_data is None else len(self.ascii_data)})"
        )


def parse_key_entries(shorts: np.ndarray) -> list[GeoKeyEntry]:
    """Group a flat run of unsigned shorts into key entries.

    Args:
        shorts: Four values per entry (key, location, count, value).

    Returns:
        The entries in file order. A trailing partial entry is dropped.
    """
    n_keys = len(shorts) // 4
    body = np.asarray(shorts[:n_keys * 4]).reshape(n_keys, 4)
    return [GeoKeyEntry(*(int(v) for v in row)) for row in body]
