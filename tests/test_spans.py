"""Tests for Span and NamedEntityType."""

import pytest

from fieldspring import InvalidRangeError, NamedEntityType, Span

LOC = NamedEntityType.LOCATION


class TestSpanConstruction:
    """Span validation and field access."""

    @pytest.mark.parametrize("start,end", [(0, 1), (3, 4), (0, 100), (7, 9)])
    def test_valid_span_exposes_fields(self, start, end):
        """Span(a, b, t) with a < b keeps its fields."""
        span = Span(start, end, LOC)
        assert span.start == start
        assert span.end == end
        assert span.type is LOC

    @pytest.mark.parametrize("start,end", [(1, 1), (5, 2), (0, 0)])
    def test_empty_or_reversed_range_rejected(self, start, end):
        """start >= end raises InvalidRangeError."""
        with pytest.raises(InvalidRangeError):
            Span(start, end, LOC)

    @pytest.mark.parametrize("start,end", [(-1, 2), (-3, -1)])
    def test_negative_bound_rejected(self, start, end):
        """Negative bounds raise InvalidRangeError."""
        with pytest.raises(InvalidRangeError, match="non-negative"):
            Span(start, end, LOC)

    def test_non_integer_bound_rejected(self):
        """Float bounds are rejected."""
        with pytest.raises(InvalidRangeError):
            Span(0.5, 2, LOC)

    def test_invalid_range_is_value_error(self):
        """InvalidRangeError can be caught as ValueError."""
        with pytest.raises(ValueError):
            Span(2, 1, LOC)

    def test_span_is_immutable(self):
        """Spans cannot be modified after construction."""
        span = Span(0, 1, LOC)
        with pytest.raises(AttributeError):
            span.start = 5

    def test_any_type_parameter(self):
        """The type field is not limited to NamedEntityType."""
        span = Span(2, 4, "custom")
        assert span.type == "custom"


class TestSpanComparison:
    """Equality, hashing and ordering."""

    def test_equal_by_fields(self):
        assert Span(0, 1, LOC) == Span(0, 1, LOC)
        assert Span(0, 1, LOC) != Span(0, 2, LOC)
        assert Span(0, 1, LOC) != Span(0, 1, NamedEntityType.PERSON)

    def test_usable_in_sets(self):
        spans = {Span(0, 1, LOC), Span(0, 1, LOC), Span(3, 4, LOC)}
        assert len(spans) == 2

    def test_sorted_by_start_end_type(self):
        spans = [
            Span(3, 4, LOC),
            Span(0, 2, LOC),
            Span(0, 1, NamedEntityType.PERSON),
            Span(0, 1, LOC),
        ]
        assert sorted(spans) == [
            Span(0, 1, LOC),
            Span(0, 1, NamedEntityType.PERSON),
            Span(0, 2, LOC),
            Span(3, 4, LOC),
        ]

    def test_all_comparisons_on_equal_bounds(self):
        loc = Span(0, 1, LOC)
        person = Span(0, 1, NamedEntityType.PERSON)
        assert loc < person
        assert loc <= person
        assert person > loc
        assert person >= loc
        assert loc <= Span(0, 1, LOC)
        assert loc >= Span(0, 1, LOC)


class TestSpanHelpers:
    """len(), contains(), overlaps(), as_slice()."""

    def test_len(self):
        assert len(Span(2, 5, LOC)) == 3

    def test_contains_is_half_open(self):
        span = Span(2, 4, LOC)
        assert span.contains(2)
        assert span.contains(3)
        assert not span.contains(4)
        assert not span.contains(1)

    def test_overlaps(self):
        assert Span(0, 2, LOC).overlaps(Span(1, 3, LOC))
        assert not Span(0, 2, LOC).overlaps(Span(2, 3, LOC))

    def test_as_slice(self, tokens):
        assert tokens[Span(3, 4, LOC).as_slice()] == ["France"]


class TestNamedEntityType:
    """NamedEntityType enum."""

    def test_location_exists(self):
        assert NamedEntityType.LOCATION.value == "location"

    def test_ordering_by_name(self):
        assert sorted(NamedEntityType) == [
            NamedEntityType.LOCATION,
            NamedEntityType.ORGANIZATION,
            NamedEntityType.PERSON,
        ]

    def test_derived_comparisons(self):
        assert NamedEntityType.PERSON > NamedEntityType.LOCATION
        assert NamedEntityType.LOCATION <= NamedEntityType.LOCATION
        assert NamedEntityType.ORGANIZATION >= NamedEntityType.LOCATION
