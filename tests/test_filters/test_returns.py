"""Tests for return and classification filters and the filter registry."""

import pytest

from tinfeed.core.classification import classification_name, parse_classes
from tinfeed.filters import AcceptAll, FilterChain, build_filter, filter_registry, get_filter
from tinfeed.filters.returns import (
    ClassificationFilter,
    FirstReturnFilter,
    LastReturnFilter,
)
from tinfeed.io.las import LasPoint


class TestReturnFilters:
    def test_first_return(self):
        f = FirstReturnFilter()
        assert f.accept(LasPoint(return_number=1, number_of_returns=3))
        assert f.accept(LasPoint(return_number=0))
        assert not f.accept(LasPoint(return_number=2, number_of_returns=3))

    def test_last_return(self):
        f = LastReturnFilter()
        assert f.accept(LasPoint(return_number=3, number_of_returns=3))
        assert f.accept(LasPoint(return_number=1, number_of_returns=1))
        assert not f.accept(LasPoint(return_number=1, number_of_returns=3))


class TestClassificationFilter:
    def test_codes(self):
        f = ClassificationFilter(classes=[2, 9])
        assert f.classes == frozenset({2, 9})
        assert f.accept(LasPoint(classification=9))
        assert not f.accept(LasPoint(classification=5))

    def test_names(self):
        f = ClassificationFilter(classes="ground, water")
        assert f.classes == frozenset({2, 9})

    def test_exclude(self):
        f = ClassificationFilter(classes="7,18", exclude=True)
        assert f.accept(LasPoint(classification=2))
        assert not f.accept(LasPoint(classification=18))

    def test_missing_classes(self):
        with pytest.raises(ValueError, match="classes"):
            ClassificationFilter()

    def test_repr(self):
        assert repr(ClassificationFilter(classes=2)) == "filters.classification(classes=2)"


class TestClassificationCodes:
    def test_parse_int(self):
        assert parse_classes(2) == frozenset({2})

    def test_parse_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown classification"):
            parse_classes("swamp")

    def test_names(self):
        assert classification_name(2) == "Ground"
        assert classification_name(40) == "Reserved"
        assert classification_name(100) == "User Definable"


class TestFilterRegistry:
    def test_get_filter(self):
        f = get_filter("filters.classification", classes="ground")
        assert isinstance(f, ClassificationFilter)

    def test_available(self):
        get_filter("filters.all")
        names = filter_registry.available
        for name in ("filters.all", "filters.range", "filters.crop",
                     "filters.firstreturn", "filters.lastreturn"):
            assert name in names

    def test_accept_all(self):
        assert AcceptAll().accept(LasPoint())

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown filter"):
            get_filter("filters.nope")


class TestBuildFilter:
    def test_none_accepts_all(self):
        assert isinstance(build_filter(None), AcceptAll)

    def test_instance_passes_through(self):
        f = FirstReturnFilter()
        assert build_filter(f) is f

    def test_stage_dict(self):
        f = build_filter({"type": "filters.classification", "classes": "ground"})
        assert isinstance(f, ClassificationFilter)
        assert f.classes == frozenset({2})

    def test_chain(self):
        f = build_filter(["filters.firstreturn", {"type": "filters.classification", "classes": 2}])
        assert isinstance(f, FilterChain)
        assert f.accept(LasPoint(classification=2, return_number=1, number_of_returns=2))
        assert not f.accept(LasPoint(classification=2, return_number=2, number_of_returns=2))
        assert not f.accept(LasPoint(classification=5, return_number=1, number_of_returns=1))

    def test_missing_type(self):
        with pytest.raises(ValueError, match="filter type"):
            build_filter({"classes": 2})
