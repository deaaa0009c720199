"""Attach recognizer output to documents.

Example:
    >>> from fieldspring import AnnotatedSource, GazetteerRecognizer, PlaintextSource
    >>> source = PlaintextSource.from_string("Paris is in France .")
    >>> with AnnotatedSource(source, [GazetteerRecognizer({"Paris", "France"})]) as docs:
    ...     for doc in docs:
    ...         print([doc[s.start:s.end].text for s in doc._.entities])
    ['Paris', 'France']
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Sequence

from spacy.tokens import Span as SpacySpan
from spacy.util import filter_spans

from fieldspring.core.spans import NamedEntityType, Span
from fieldspring.errors import SourceClosedError
from fieldspring.nlp.pipeline import surface_forms

if TYPE_CHECKING:
    from spacy.tokens import Doc

    from fieldspring.core.protocols import DocumentSourceProtocol, Recognizer

logger = logging.getLogger(__name__)

SPANS_KEY = "entities"


def recognize_all(
    recognizers: Iterable[Recognizer],
    tokens: Sequence[str],
) -> list[Span[NamedEntityType]]:
    """Run every recognizer over ``tokens`` and return the sorted union.

    Spans from different recognizers may overlap; no conflict resolution is
    attempted here.
    """
    spans: set[Span[NamedEntityType]] = set()
    for recognizer in recognizers:
        spans |= recognizer.recognize(tokens)
    return sorted(spans)


def annotate(doc: Doc, recognizers: Iterable[Recognizer]) -> Doc:
    """Recognize entities in ``doc`` and attach them.

    Sets ``doc._.entities`` to the sorted spans and mirrors them into
    ``doc.spans["entities"]`` as labelled spaCy spans. Each span is handled
    on its own, so overlapping output is stored as is. Overlaps are only
    dropped from ``doc.ents``, which spaCy requires to be disjoint.
    """
    spans = recognize_all(recognizers, surface_forms(doc))
    doc._.entities = spans

    spacy_spans = [
        SpacySpan(doc, span.start, span.end, label=span.type.name)
        for span in spans
    ]
    doc.spans[SPANS_KEY] = spacy_spans
    doc.ents = filter_spans(spacy_spans)
    return doc


class AnnotatedSource:
    """Wrap a document source and annotate each Doc as it is pulled.

    The wrapped source is owned: closing this closes it.

    Args:
        source: Source to pull Docs from.
        recognizers: Recognizers to run over each Doc's tokens.
    """

    def __init__(
        self,
        source: DocumentSourceProtocol,
        recognizers: Iterable[Recognizer],
    ):
        self._source = source
        self._recognizers = tuple(recognizers)

    @property
    def recognizers(self) -> tuple[Recognizer, ...]:
        return self._recognizers

    @property
    def closed(self) -> bool:
        return self._source.closed

    def __iter__(self) -> "AnnotatedSource":
        return self

    def __next__(self) -> Doc:
        if self._source.closed:
            raise SourceClosedError("Cannot read from a closed AnnotatedSource.")
        doc = next(self._source)
        annotate(doc, self._recognizers)
        logger.debug("Annotated %s with %d spans", doc._.docid, len(doc._.entities))
        return doc

    def next_document(self) -> Doc | None:
        """Return the next annotated Doc, or None when exhausted."""
        return next(self, None)

    def close(self) -> None:
        self._source.close()

    def __enter__(self) -> "AnnotatedSource":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"AnnotatedSource({self._source!r}, {len(self._recognizers)} recognizers)"
