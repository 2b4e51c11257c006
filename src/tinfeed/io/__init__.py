"""Readers for vertex and constraint sources."""

from tinfeed.io.constraints import ConstraintLoader, write_constraint_file
from tinfeed.io.dbf import DbfFileReader
from tinfeed.io.las import LasFileReader
from tinfeed.io.registry import io_registry, read_constraints, read_vertices
from tinfeed.io.shapefile import ShapefileReader

__all__ = [
    "ConstraintLoader",
    "DbfFileReader",
    "LasFileReader",
    "ShapefileReader",
    "io_registry",
    "read_constraints",
    "read_vertices",
    "write_constraint_file",
]
