"""Typed token spans and entity categories."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Generic, TypeVar

from fieldspring.errors import InvalidRangeError

T = TypeVar("T")


@total_ordering
class NamedEntityType(Enum):
    """Semantic categories a recognizer can tag.

    Members compare by name so that spans over different categories
    still sort deterministically.
    """

    LOCATION = "location"
    PERSON = "person"
    ORGANIZATION = "organization"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, NamedEntityType):
            return NotImplemented
        return self.name < other.name


@dataclass(frozen=True, order=True)
class Span(Generic[T]):
    """Half-open range ``[start, end)`` tagged with a type.

    Offsets are token indices when produced by a recognizer, but nothing
    here depends on that; character offsets work just as well.

    Example:
        >>> span = Span(0, 1, NamedEntityType.LOCATION)
        >>> tokens = ["Paris", "is", "in", "France", "."]
        >>> tokens[span.as_slice()]
        ['Paris']
    """

    start: int
    end: int
    type: T

    def __post_init__(self) -> None:
        for bound in (self.start, self.end):
            if isinstance(bound, bool) or not isinstance(bound, int):
                raise InvalidRangeError(
                    f"Span bounds must be integers, got {self.start!r}, {self.end!r}"
                )
        if self.start < 0 or self.end < 0:
            raise InvalidRangeError(
                f"Span bounds must be non-negative, got [{self.start}, {self.end})"
            )
        if self.start >= self.end:
            raise InvalidRangeError(
                f"Span start must be less than end, got [{self.start}, {self.end})"
            )

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, index: int) -> bool:
        """Whether ``index`` falls inside the span."""
        return self.start <= index < self.end

    def overlaps(self, other: "Span") -> bool:
        """Whether the two spans share at least one offset."""
        return self.start < other.end and other.start < self.end

    def as_slice(self) -> slice:
        return slice(self.start, self.end)
