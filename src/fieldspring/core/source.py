"""Base document source class.

This module provides the abstract base class that all document sources
inherit from. It owns the LineReader, handles lazy pipeline loading, and
implements the pull-based iteration and close lifecycle. Subclasses only
decide where one document ends and the next begins.
"""

from __future__ import annotations

import logging
import unicodedata
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

from spacy.tokens import Doc

from fieldspring.core.io import LineReader
from fieldspring.errors import SourceClosedError
from fieldspring.nlp.pipeline import get_nlp

if TYPE_CHECKING:
    from spacy import Language
    from spacy.tokens import Span

logger = logging.getLogger(__name__)

__all__ = ["DocumentSource"]


class DocumentSource(ABC):
    """Abstract base class for lazy document sources.

    A source wraps exactly one LineReader and produces spaCy Docs one pull
    at a time. It is not rewindable: to read the same input again, build a
    new source over a fresh reader.

    To create a new source, subclass and implement:

    Required:
        - _iter_documents() -> generator of Docs, pulling lines with
          self._read_line() until it returns None

    Optional overrides:
        - _normalize_text(text) -> cleaned text

    Example:
        class LineSource(DocumentSource):
            def _iter_documents(self) -> Iterator[Doc]:
                while (line := self._read_line()) is not None:
                    if line.strip():
                        yield self._make_doc(line)

        with LineSource.from_path("corpus.txt") as source:
            for doc in source:
                print(doc._.docid, len(doc))
    """

    def __init__(
        self,
        reader: LineReader,
        lang: str = "en",
        model_name: str | None = None,
        nlp: Language | None = None,
    ):
        """Initialize the source.

        Args:
            reader: LineReader to pull from. The source takes ownership and
                closes it in close().
            lang: Language code for the tokenizer.
            model_name: spaCy package or path to tokenize with instead of a
                blank pipeline.
            nlp: Ready-made pipeline; overrides lang and model_name.
        """
        self._reader = reader
        self._lang = lang
        self._model_name = model_name
        self._nlp = nlp  # Lazy loaded
        self._documents: Iterator[Doc] | None = None
        self._count = 0
        self._closed = False

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        encoding: str = "utf-8",
        strict: bool = False,
        **kwargs: Any,
    ) -> "DocumentSource":
        """Create a source reading the file at ``path``.

        Args:
            path: File to read.
            encoding: Text encoding of the file.
            strict: If True, read faults raise instead of ending the stream.
            **kwargs: Passed on to the source constructor.
        """
        return cls(LineReader.open(path, encoding=encoding, strict=strict), **kwargs)

    @classmethod
    def from_string(
        cls,
        text: str,
        name: str = "<string>",
        strict: bool = False,
        **kwargs: Any,
    ) -> "DocumentSource":
        """Create a source over an in-memory string."""
        return cls(LineReader.from_string(text, name=name, strict=strict), **kwargs)

    @property
    def name(self) -> str:
        """Name of the underlying input, used in document ids."""
        return self._reader.name

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def documents_read(self) -> int:
        """Number of documents pulled so far."""
        return self._count

    @property
    def nlp(self) -> Language:
        """spaCy pipeline (lazy loaded on first access)."""
        if self._nlp is None:
            self._nlp = get_nlp(self._lang, self._model_name)
        return self._nlp

    def _read_line(self) -> str | None:
        """Pull the next line from the owned reader."""
        return self._reader.read_line()

    def _normalize_text(self, text: str) -> str:
        """Normalize text. Override for format-specific cleaning."""
        return unicodedata.normalize("NFC", text)

    def _make_doc(self, text: str, metadata: dict[str, Any] | None = None) -> Doc:
        """Tokenize text into a Doc carrying ``metadata``."""
        doc = self.nlp(self._normalize_text(text))
        doc._.metadata = dict(metadata or {})
        return doc

    def _make_doc_from_words(
        self,
        words: list[str],
        spaces: list[bool] | None = None,
        sent_starts: list[bool] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Doc:
        """Build a Doc from pre-tokenized words, bypassing the tokenizer."""
        doc = Doc(self.nlp.vocab, words=words, spaces=spaces, sent_starts=sent_starts)
        doc._.metadata = dict(metadata or {})
        return doc

    @abstractmethod
    def _iter_documents(self) -> Iterator[Doc]:
        """Yield Docs built from lines pulled with self._read_line().

        This is the main extension point for subclasses. The generator is
        created on the first pull and closed by close(), so any cleanup in a
        ``finally`` block runs even when the consumer stops early.

        Yields:
            One Doc per logical unit of input.
        """
        ...

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def __iter__(self) -> "DocumentSource":
        return self

    def __next__(self) -> Doc:
        if self._closed:
            raise SourceClosedError(
                f"Cannot read from closed source {self.name!r}. "
                "Create a new source over a fresh reader to read again."
            )
        if self._documents is None:
            self._documents = self._iter_documents()

        doc = next(self._documents)
        doc._.docid = f"{self.name}:{self._count}"
        if doc._.metadata is None:
            doc._.metadata = {}
        doc._.metadata.setdefault("source", self.name)
        self._count += 1
        return doc

    def next_document(self) -> Doc | None:
        """Return the next Doc, or None when the source is exhausted."""
        return next(self, None)

    def texts(self) -> Iterator[str]:
        """Yield the text of each remaining document."""
        for doc in self:
            yield doc.text

    def sents(self, as_text: bool = False) -> Iterator["Span | str"]:
        """Yield sentences from the remaining documents.

        Args:
            as_text: If True, yield strings instead of Span objects.
        """
        for doc in self:
            for sent in doc.sents:
                yield sent.text if as_text else sent

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Release the reader. Safe to call any number of times."""
        if self._closed:
            return
        self._closed = True
        documents, self._documents = self._documents, None
        try:
            if documents is not None:
                documents.close()
        finally:
            self._reader.close()
            logger.debug("Closed source %s after %d documents", self.name, self._count)

    def __enter__(self) -> "DocumentSource":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"{type(self).__name__}({self.name!r}, {state})"
