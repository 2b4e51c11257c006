"""Filters on return number and classification."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tinfeed.core.classification import parse_classes
from tinfeed.filters.base import RecordFilter
from tinfeed.filters.registry import filter_registry

if TYPE_CHECKING:
    from tinfeed.io.las import LasPoint


class FirstReturnFilter(RecordFilter):
    """Keep the first return of each pulse.

    Useful when building a surface model from the highest return. Records
    with a return number of 0 (invalid in LAS but found in the wild) are
    treated as first returns.
    """

    def accept(self, point: LasPoint) -> bool:
        return point.return_number <= 1

    @classmethod
    def type_name(cls) -> str:
        return "filters.firstreturn"


class LastReturnFilter(RecordFilter):
    """Keep the last return of each pulse (ground-model candidates)."""

    def accept(self, point: LasPoint) -> bool:
        return point.return_number >= point.number_of_returns

    @classmethod
    def type_name(cls) -> str:
        return "filters.lastreturn"


class ClassificationFilter(RecordFilter):
    """Keep records whose classification is in a given set.

    Options:
        classes: int, list of ints, or comma-separated codes/names,
            e.g. "2,9" or "ground,water".
        exclude: bool, invert the selection (default: False).
    """

    def __init__(self, **options: Any) -> None:
        super().__init__(**options)
        if "classes" not in self.options:
            raise ValueError("ClassificationFilter requires 'classes' option")
        self._classes = parse_classes(self.options["classes"])
        self._exclude = bool(self.options.get("exclude", False))

    @property
    def classes(self) -> frozenset[int]:
        return self._classes

    def accept(self, point: LasPoint) -> bool:
        return (point.classification in self._classes) != self._exclude

    @classmethod
    def type_name(cls) -> str:
        return "filters.classification"


filter_registry.register(FirstReturnFilter)
filter_registry.register(LastReturnFilter)
filter_registry.register(ClassificationFilter)
