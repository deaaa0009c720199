"""Protocol definitions for recognizers and document sources.

These protocols define the interface contract the pipeline relies on.
Use these for type hints when you want to accept any compatible object,
including recognizers backed by libraries this package knows nothing about.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from spacy.tokens import Doc

    from fieldspring.core.spans import NamedEntityType, Span


@runtime_checkable
class Recognizer(Protocol):
    """Maps an ordered token sequence to typed, non-overlapping spans.

    Implementations must:
        - return spans in token index space with 0 <= start < end <= len(tokens)
        - tag every span with ``entity_type``
        - return the same set for the same input, without mutating themselves,
          so one instance can serve concurrent callers
        - return an empty set for an empty token sequence
    """

    entity_type: NamedEntityType

    def recognize(self, tokens: Sequence[str]) -> set[Span[NamedEntityType]]:
        """Return the spans recognized in ``tokens``."""
        ...


@runtime_checkable
class DocumentSourceProtocol(Protocol):
    """Lazy, pull-based producer of Docs that owns one input stream."""

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        ...

    def __iter__(self) -> Iterator["Doc"]:
        ...

    def __next__(self) -> "Doc":
        ...

    def close(self) -> None:
        """Release the underlying stream. Idempotent, never raises."""
        ...
