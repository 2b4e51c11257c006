"""Exception types raised by the readers."""

from __future__ import annotations


class TinfeedError(Exception):
    """Base class for all tinfeed errors."""


class FormatError(TinfeedError, ValueError):
    """Input bytes or text do not match the expected file format.

    Attributes:
        path: File the error was found in, if known.
        record: Zero-based record index (LAS) or record number (Shapefile/DBF).
        line: 1-based source line number for text inputs.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        record: int | None = None,
        line: int | None = None,
    ) -> None:
        self.message = message
        self.path = path
        self.record = record
        self.line = line
        parts = [message]
        if line is not None:
            parts.append(f"on line {line}")
        if record is not None:
            parts.append(f"(record {record})")
        if path is not None:
            parts.append(f"in {path}")
        super().__init__(" ".join(parts))


class StateError(TinfeedError, RuntimeError):
    """Operation attempted on a reader that has been closed."""
