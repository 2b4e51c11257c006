"""tinfeed: feed LAS, Shapefile and text data into a triangulation."""

from tinfeed._version import __version__
from tinfeed.core.bounds import Bounds
from tinfeed.core.constraint import Constraint, LinearConstraint, PolygonConstraint
from tinfeed.core.metadata import Metadata
from tinfeed.core.vertex import Vertex
from tinfeed.errors import FormatError, StateError, TinfeedError
from tinfeed.io.constraints import ConstraintLoader
from tinfeed.io.las import LasFileReader
from tinfeed.io.registry import read_constraints, read_vertices

__all__ = [
    "__version__",
    "Bounds",
    "Constraint",
    "ConstraintLoader",
    "FormatError",
    "LasFileReader",
    "LinearConstraint",
    "Metadata",
    "PolygonConstraint",
    "StateError",
    "TinfeedError",
    "Vertex",
    "read_constraints",
    "read_vertices",
]
