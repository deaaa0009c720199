"""Tokenization pipeline management for fieldspring.

This module handles lazy loading and caching of spaCy pipelines used to
turn raw text into Docs, as well as registration of the custom extensions
that carry document identity and recognized entities.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

import spacy
from spacy.tokens import Doc

if TYPE_CHECKING:
    from spacy import Language

    from fieldspring.core.spans import NamedEntityType, Span


# Register custom extensions once at module load
def _register_extensions() -> None:
    """Register spaCy custom extensions for document identity and entities."""
    if not Doc.has_extension("docid"):
        Doc.set_extension("docid", default=None)
    if not Doc.has_extension("metadata"):
        Doc.set_extension("metadata", default=None)
    # Set per document by AnnotatedSource; a shared list default would leak
    # spans between documents.
    if not Doc.has_extension("entities"):
        Doc.set_extension("entities", default=None)


# Register on import
_register_extensions()


def create_pipeline(lang: str = "en", model_name: str | None = None) -> Language:
    """Create a spaCy pipeline for tokenization and sentence splitting.

    Args:
        lang: Language code for the blank tokenizer.
        model_name: Installed spaCy package or path to load instead of a
            blank pipeline. Its own NER is disabled; recognition is done by
            recognizers, not by the tokenizer.

    Returns:
        Configured spaCy pipeline.
    """
    if model_name is None:
        nlp = spacy.blank(lang)
        nlp.add_pipe("sentencizer")
    else:
        nlp = spacy.load(model_name, disable=["ner"])
        if not nlp.has_pipe("parser") and not nlp.has_pipe("senter"):
            nlp.add_pipe("sentencizer")

    nlp.max_length = 2_500_000  # Handle large documents
    return nlp


@lru_cache(maxsize=4)
def get_nlp(lang: str = "en", model_name: str | None = None) -> Language:
    """Get a cached pipeline for the given language or model.

    This is the main entry point used by document sources. Pipelines are
    cached, so many sources over the same language share one tokenizer.

    Example:
        >>> nlp = get_nlp("en")
        >>> [t.text for t in nlp("Paris is in France.")]
        ['Paris', 'is', 'in', 'France', '.']
    """
    return create_pipeline(lang, model_name=model_name)


def surface_forms(doc: Doc) -> list[str]:
    """Token surface strings of a Doc, in order."""
    return [token.text for token in doc]


def entities(doc: Doc) -> list[Span[NamedEntityType]]:
    """Recognized spans attached to a Doc (empty if never annotated)."""
    return list(doc._.entities or [])
