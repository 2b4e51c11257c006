"""Core data model for tinfeed."""

from tinfeed.core.bounds import Bounds
from tinfeed.core.constraint import Constraint, LinearConstraint, PolygonConstraint
from tinfeed.core.metadata import Metadata
from tinfeed.core.transform import GeographicRescale, SimpleGeographicTransform
from tinfeed.core.units import LinearUnits
from tinfeed.core.vertex import Vertex

__all__ = [
    "Bounds",
    "Constraint",
    "GeographicRescale",
    "LinearConstraint",
    "LinearUnits",
    "Metadata",
    "PolygonConstraint",
    "SimpleGeographicTransform",
    "Vertex",
]
