"""Recognizer implementations."""

from fieldspring.recognizers.gazetteer import GazetteerRecognizer
from fieldspring.recognizers.spacy_ner import DEFAULT_LABELS, SpacyRecognizer

__all__ = [
    "GazetteerRecognizer",
    "SpacyRecognizer",
    "DEFAULT_LABELS",
]
