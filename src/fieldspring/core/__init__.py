"""Core abstractions for fieldspring."""

from fieldspring.core.annotate import AnnotatedSource, annotate, recognize_all
from fieldspring.core.combined import CombinedSource, corpus_files, open_corpus
from fieldspring.core.io import LineReader
from fieldspring.core.protocols import DocumentSourceProtocol, Recognizer
from fieldspring.core.source import DocumentSource
from fieldspring.core.spans import NamedEntityType, Span

__all__ = [
    "AnnotatedSource",
    "annotate",
    "recognize_all",
    "CombinedSource",
    "corpus_files",
    "open_corpus",
    "LineReader",
    "DocumentSourceProtocol",
    "Recognizer",
    "DocumentSource",
    "NamedEntityType",
    "Span",
]
