"""Plaintext document source.

Splits a plain text stream into documents by one of three strategies:

- ``"paragraph"``: runs of non-blank lines separated by blank lines (default)
- ``"line"``: every non-blank line is its own document
- ``"stream"``: the whole input is a single document

A document longer than the pipeline's ``max_length`` (2,500,000 characters
for pipelines from ``create_pipeline``) is rejected by spaCy with a
ValueError. Only ``"stream"`` is likely to reach it; raise ``nlp.max_length``
or pick a finer segmentation for very large inputs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator

from fieldspring.core.io import LineReader
from fieldspring.core.source import DocumentSource

if TYPE_CHECKING:
    from spacy import Language
    from spacy.tokens import Doc

logger = logging.getLogger(__name__)

SEGMENTATIONS = ("paragraph", "line", "stream")


class PlaintextSource(DocumentSource):
    """Source for plain text with paragraph, line, or whole-stream documents.

    Lines belonging to one document are joined with single spaces before
    tokenization, so line breaks inside a paragraph never become tokens.

    Example:
        >>> source = PlaintextSource.from_string("Paris is in France .\\n\\nRome too .")
        >>> [doc.text for doc in source]
        ['Paris is in France .', 'Rome too .']
    """

    def __init__(
        self,
        reader: LineReader,
        segment_by: str = "paragraph",
        lang: str = "en",
        model_name: str | None = None,
        nlp: Language | None = None,
    ):
        """Initialize the plaintext source.

        Args:
            reader: LineReader to pull from.
            segment_by: One of "paragraph", "line", or "stream".
            lang: Language code for the tokenizer.
            model_name: spaCy package or path to tokenize with.
            nlp: Ready-made pipeline.
        """
        if segment_by not in SEGMENTATIONS:
            raise ValueError(
                f"Unknown segmentation {segment_by!r}. "
                f"Use one of: {', '.join(SEGMENTATIONS)}"
            )
        super().__init__(reader, lang=lang, model_name=model_name, nlp=nlp)
        self._segment_by = segment_by

    @property
    def segment_by(self) -> str:
        return self._segment_by

    def _iter_documents(self) -> Iterator["Doc"]:
        """Group lines into documents according to the segmentation."""
        buffer: list[str] = []
        first_line = 0
        lineno = 0

        while (line := self._read_line()) is not None:
            lineno += 1
            if not line.strip():
                if self._segment_by == "paragraph" and buffer:
                    yield self._paragraph_doc(buffer, first_line)
                    buffer = []
                continue

            if not buffer:
                first_line = lineno
            buffer.append(line.strip())

            if self._segment_by == "line":
                yield self._paragraph_doc(buffer, first_line)
                buffer = []

        # Handle input not ending with a blank line
        if buffer:
            yield self._paragraph_doc(buffer, first_line)

    def _paragraph_doc(self, lines: list[str], first_line: int) -> "Doc":
        metadata = {
            "first_line": first_line,
            "n_lines": len(lines),
        }
        text = " ".join(lines)
        if len(text) > self.nlp.max_length:
            logger.warning(
                "Document at line %d of %s has %d characters, over the "
                "pipeline max_length of %d",
                first_line, self.name, len(text), self.nlp.max_length,
            )
        return self._make_doc(text, metadata)
