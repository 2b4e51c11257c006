"""Base class for LAS record filters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tinfeed.io.las import LasPoint


class RecordFilter(ABC):
    """Base class for filters deciding which LAS records become vertices.

    Subclasses implement `accept()`, which is called once per decoded
    record with the reader's scratch point. The point is only valid for
    the duration of the call.
    """

    def __init__(self, **options: Any) -> None:
        self.options = options

    @abstractmethod
    def accept(self, point: LasPoint) -> bool:
        """Return True if the record should be kept."""

    @classmethod
    @abstractmethod
    def type_name(cls) -> str:
        """Registry identifier (e.g., 'filters.range')."""

    def __repr__(self) -> str:
        opts = ", ".join(f"{k}={v!r}" for k, v in self.options.items())
        return f"{self.type_name()}({opts})"


class AcceptAll(RecordFilter):
    """Keep every record."""

    def accept(self, point: LasPoint) -> bool:
        return True

    @classmethod
    def type_name(cls) -> str:
        return "filters.all"


class FilterChain(RecordFilter):
    """Keep a record only when every filter in the chain accepts it.

    Filters run in order and evaluation stops at the first rejection.
    """

    def __init__(self, filters: list[RecordFilter], **options: Any) -> None:
        super().__init__(**options)
        self.filters = list(filters)

    def accept(self, point: LasPoint) -> bool:
        return all(f.accept(point) for f in self.filters)

    @classmethod
    def type_name(cls) -> str:
        return "filters.chain"

    def __repr__(self) -> str:
        return f"{self.type_name()}({', '.join(repr(f) for f in self.filters)})"
