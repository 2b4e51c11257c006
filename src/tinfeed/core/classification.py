"""ASPRS LAS classification codes."""

from __future__ import annotations

# Codes 0-18 as defined for point data formats 6-10; formats 0-5 share 0-12
CLASSIFICATION_CODES: dict[int, str] = {
    0: "Created, Never Classified",
    1: "Unclassified",
    2: "Ground",
    3: "Low Vegetation",
    4: "Medium Vegetation",
    5: "High Vegetation",
    6: "Building",
    7: "Low Point (Noise)",
    8: "Reserved / Model Key-point",
    9: "Water",
    10: "Rail",
    11: "Road Surface",
    12: "Reserved / Overlap",
    13: "Wire - Guard (Shield)",
    14: "Wire - Conductor (Phase)",
    15: "Transmission Tower",
    16: "Wire-structure Connector",
    17: "Bridge Deck",
    18: "High Noise",
}

GROUND = 2
LOW_NOISE = 7
WATER = 9
HIGH_NOISE = 18

_NAME_TO_CODE = {
    name.lower().split(" (")[0].split(" /")[0]: code
    for code, name in CLASSIFICATION_CODES.items()
}


def classification_name(code: int) -> str:
    """Human-readable name of a classification code."""
    if code in CLASSIFICATION_CODES:
        return CLASSIFICATION_CODES[code]
    if code <= 63:
        return "Reserved"
    return "User Definable"


def parse_classes(spec: str | int | list[int] | tuple[int, ...]) -> frozenset[int]:
    """Parse a set of classification codes.

    Accepts an int, a sequence of ints, or a comma-separated string of
    codes and/or names, e.g. ``"2,9"`` or ``"ground, water"``.
    """
    if isinstance(spec, int):
        return frozenset([spec])
    if not isinstance(spec, str):
        return frozenset(int(c) for c in spec)

    codes = set()
    for token in spec.split(","):
        token = token.strip()
        if not token:
            continue
        if token.isdigit():
            codes.add(int(token))
        elif token.lower() in _NAME_TO_CODE:
            codes.add(_NAME_TO_CODE[token.lower()])
        else:
            raise ValueError(
                f"Unknown classification '{token}'. "
                f"Use a code or one of: {sorted(_NAME_TO_CODE)}"
            )
    return frozenset(codes)
