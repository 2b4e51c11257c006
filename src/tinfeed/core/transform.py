"""Coordinate transforms applied to vertices before triangulation."""

from __future__ import annotations

import math
from dataclasses import dataclass

from tinfeed.core.units import LinearUnits

EARTH_SEMI_MAJOR_AXIS = 6378137.0
EARTH_FLATTENING = 1 / 298.257223560  # WGS-84


class SimpleGeographicTransform:
    """Local equirectangular projection of latitude/longitude to planar units.

    Distances are scaled by an earth radius adjusted for the center
    latitude. The approximation is good over the extent of a typical
    lidar survey, not over continental areas.

    Args:
        center_latitude: Latitude of the projection origin in degrees.
            Must lie within [-87.5, 87.5].
        center_longitude: Longitude of the projection origin in degrees.
        units: Planar units of the output coordinates.
    """

    def __init__(
        self,
        center_latitude: float,
        center_longitude: float,
        units: LinearUnits = LinearUnits.METERS,
    ) -> None:
        if abs(center_latitude) > 87.5:
            raise ValueError(
                f"Center latitude {center_latitude} outside range -87.5 to 87.5"
            )
        self.center_latitude = center_latitude
        self.center_longitude = center_longitude
        self.units = units

        a = EARTH_SEMI_MAJOR_AXIS / units.to_meters
        phi = math.radians(center_latitude)
        sin_phi = math.sin(phi)
        adjusted_radius = (1 - EARTH_FLATTENING * sin_phi * sin_phi) * a
        self.x_scale = (math.pi / 180) * adjusted_radius * math.cos(phi)
        self.y_scale = (math.pi / 180) * adjusted_radius

    def forward(self, longitude: float, latitude: float) -> tuple[float, float]:
        """Project a geographic position to planar (x, y).

        Raises:
            ValueError: If the latitude is beyond 89 degrees.
        """
        if abs(latitude) > 89:
            raise ValueError(f"Latitude {latitude} too close to a pole")
        return (
            (longitude - self.center_longitude) * self.x_scale,
            (latitude - self.center_latitude) * self.y_scale,
        )

    def inverse(self, x: float, y: float) -> tuple[float, float]:
        """Return the (longitude, latitude) of a planar position."""
        return (
            x / self.x_scale + self.center_longitude,
            y / self.y_scale + self.center_latitude,
        )

    def __repr__(self) -> str:
        return (
            f"SimpleGeographicTransform(lat={self.center_latitude:.6f}, "
            f"lon={self.center_longitude:.6f}, units={self.units.label})"
        )


@dataclass
class GeographicRescale:
    """Affine rescale applied to constraint coordinates on load.

    Each coordinate becomes ``(raw - offset) * scale`` per axis. Used to
    bring geographic constraint files into the same planar frame as a
    vertex set that was projected by SimpleGeographicTransform.
    """

    scale_x: float = 1.0
    scale_y: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    @classmethod
    def from_transform(cls, transform: SimpleGeographicTransform) -> GeographicRescale:
        return cls(
            scale_x=transform.x_scale,
            scale_y=transform.y_scale,
            offset_x=transform.center_longitude,
            offset_y=transform.center_latitude,
        )

    def forward(self, x: float, y: float) -> tuple[float, float]:
        return (x - self.offset_x) * self.scale_x, (y - self.offset_y) * self.scale_y
