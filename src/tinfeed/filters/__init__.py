"""Record filters applied while reading LAS vertices."""

from tinfeed.filters.base import AcceptAll, FilterChain, RecordFilter
from tinfeed.filters.registry import build_filter, filter_registry, get_filter

__all__ = [
    "AcceptAll",
    "FilterChain",
    "RecordFilter",
    "build_filter",
    "filter_registry",
    "get_filter",
]
