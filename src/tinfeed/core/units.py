"""Linear units of measure declared by georeferencing metadata."""

from __future__ import annotations

from enum import Enum


class LinearUnits(Enum):
    """Linear unit with its conversion factor to meters.

    Attributes:
        to_meters: Multiplier converting a value in this unit to meters.
            UNKNOWN uses 1.0 so that unconverted data passes through.
    """

    UNKNOWN = ("unknown", 1.0)
    METERS = ("meters", 1.0)
    FEET = ("feet", 0.3048)
    FATHOMS = ("fathoms", 1.8288)

    def __init__(self, label: str, to_meters: float) -> None:
        self.label = label
        self.to_meters = to_meters

    def to_meters_value(self, value: float) -> float:
        return value * self.to_meters

    @classmethod
    def from_unit_code(cls, code: int | None) -> LinearUnits:
        """Map an EPSG linear unit code to a unit.

        9001 is the meter, 9002 through 9006 are the assorted feet
        (international, US survey, Clarke, Indian and Sears), 9014 is the
        fathom. Anything else, including None, is UNKNOWN.
        """
        if code == 9001:
            return cls.METERS
        if code is not None and 9002 <= code <= 9006:
            return cls.FEET
        if code == 9014:
            return cls.FATHOMS
        return cls.UNKNOWN
