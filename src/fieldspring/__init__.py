"""
fieldspring: Document streaming and entity span annotation.

This package turns character streams into lazily produced spaCy Docs and
tags them with typed token spans from pluggable recognizers, ready for
downstream toponym resolution.

Sources:
    - PlaintextSource: paragraph, line, or whole-stream documents
    - ConlluSource: pre-tokenized CoNLL-U documents
    - CombinedSource: several sources read one after another

Recognizers:
    - GazetteerRecognizer: longest-match gazetteer lookup
    - SpacyRecognizer: serialized spaCy pipeline

Core:
    - LineReader: fail-soft line reading
    - Span, NamedEntityType: typed token ranges
    - AnnotatedSource: attach recognizer output to each Doc
    - ResourceLocator, Settings: model and gazetteer directories

Example:
    >>> from fieldspring import AnnotatedSource, GazetteerRecognizer, PlaintextSource
    >>>
    >>> source = PlaintextSource.from_path("news.txt")
    >>> recognizer = GazetteerRecognizer.from_file("locations.txt")
    >>> with AnnotatedSource(source, [recognizer]) as docs:
    ...     for doc in docs:
    ...         print(doc._.docid, doc._.entities)
"""

from fieldspring.config import ResourceLocator, Settings
from fieldspring.core.annotate import AnnotatedSource, annotate, recognize_all
from fieldspring.core.combined import CombinedSource, open_corpus
from fieldspring.core.io import LineReader
from fieldspring.core.protocols import Recognizer
from fieldspring.core.source import DocumentSource
from fieldspring.core.spans import NamedEntityType, Span
from fieldspring.errors import (
    FieldspringError,
    InvalidRangeError,
    ModelLoadError,
    ResourceNotFoundError,
    SourceClosedError,
)
from fieldspring.recognizers.gazetteer import GazetteerRecognizer
from fieldspring.recognizers.spacy_ner import SpacyRecognizer
from fieldspring.sources.conllu import ConlluSource
from fieldspring.sources.plaintext import PlaintextSource

__version__ = "0.1.0"
__all__ = [
    # Sources
    "DocumentSource",
    "PlaintextSource",
    "ConlluSource",
    "CombinedSource",
    "open_corpus",
    "AnnotatedSource",
    # Recognizers
    "Recognizer",
    "GazetteerRecognizer",
    "SpacyRecognizer",
    "annotate",
    "recognize_all",
    # Core
    "LineReader",
    "Span",
    "NamedEntityType",
    "ResourceLocator",
    "Settings",
    # Errors
    "FieldspringError",
    "InvalidRangeError",
    "ModelLoadError",
    "ResourceNotFoundError",
    "SourceClosedError",
]
