"""Filter registry and discovery."""

from __future__ import annotations

from typing import Any

from tinfeed.filters.base import AcceptAll, FilterChain, RecordFilter


class FilterRegistry:
    """Registry for record filter classes, keyed by type name."""

    def __init__(self) -> None:
        self._filters: dict[str, type[RecordFilter]] = {}

    def register(self, cls: type[RecordFilter]) -> None:
        """Register a filter class."""
        self._filters[cls.type_name()] = cls

    def get(self, type_name: str, **options: Any) -> RecordFilter:
        """Create a filter instance by type name."""
        if type_name not in self._filters:
            raise ValueError(
                f"Unknown filter '{type_name}'. "
                f"Available: {list(self._filters.keys())}"
            )
        return self._filters[type_name](**options)

    @property
    def available(self) -> list[str]:
        """List of registered record filter type names."""
        return list(self._filters.keys())


# Global registry
filter_registry = FilterRegistry()
filter_registry.register(AcceptAll)

_registered = False


def _ensure_registered() -> None:
    """Lazy-register all built-in filters."""
    global _registered
    if _registered:
        return
    _registered = True

    # Built-in filters register themselves on import
    from tinfeed.filters import crop as _crop  # noqa: F401
    from tinfeed.filters import range as _range  # noqa: F401
    from tinfeed.filters import returns as _returns  # noqa: F401


def get_filter(type_name: str, **options: Any) -> RecordFilter:
    """Get a filter instance by type name (convenience function)."""
    _ensure_registered()
    return filter_registry.get(type_name, **options)


def build_filter(stage: Any) -> RecordFilter:
    """Build a record filter from a stage description.

    A stage may be a RecordFilter instance, a type name such as
    ``"filters.firstreturn"``, a dict with a ``"type"`` key plus options
    (``{"type": "filters.range", "limits": "Z[0:100]"}``), a list of any
    of these (combined into a FilterChain), or None for AcceptAll.

    Raises:
        ValueError: If a stage has no type or names an unknown filter.
    """
    if stage is None:
        return AcceptAll()
    if isinstance(stage, RecordFilter):
        return stage
    if isinstance(stage, str):
        return get_filter(stage)
    if isinstance(stage, dict):
        options = {k: v for k, v in stage.items() if k != "type"}
        type_name = stage.get("type")
        if not type_name:
            raise ValueError(f"Cannot determine filter type: {stage}")
        return get_filter(type_name, **options)
    if isinstance(stage, (list, tuple)):
        filters = [build_filter(s) for s in stage]
        if len(filters) == 1:
            return filters[0]
        return FilterChain(filters)
    raise ValueError(f"Cannot build a filter from {stage!r}")
