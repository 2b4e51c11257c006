"""CRS (Coordinate Reference System) utilities wrapping pyproj."""

from __future__ import annotations

import logging

from pyproj import CRS
from pyproj.exceptions import CRSError

from tinfeed.io.geotiff import GeoKey, GeoTiffData

logger = logging.getLogger(__name__)

# GeoTIFF reserves 0, 32767 (user defined) and above for non-EPSG values
_EPSG_MIN = 1
_EPSG_MAX = 32766


def epsg_code_from_geotiff(gtd: GeoTiffData) -> int | None:
    """EPSG code named by the GeoTIFF keys.

    The projected CRS key takes precedence over the geographic one.
    """
    for key in (GeoKey.ProjectedCSTypeGeoKey, GeoKey.GeographicTypeGeoKey):
        code = gtd.get_integer(key)
        if code is not None and _EPSG_MIN <= code <= _EPSG_MAX:
            return code
    return None


def crs_from_geotiff(gtd: GeoTiffData | None) -> CRS | None:
    """Build a pyproj CRS from GeoTIFF keys.

    Only EPSG-coded systems are resolved. User-defined systems built from
    individual projection parameters yield None.
    """
    if gtd is None:
        return None
    code = epsg_code_from_geotiff(gtd)
    if code is None:
        return None
    try:
        return CRS.from_epsg(code)
    except CRSError:
        logger.warning("GeoTIFF names EPSG:%d, which pyproj does not know", code)
        return None
