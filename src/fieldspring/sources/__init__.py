"""Document source implementations."""

from fieldspring.sources.conllu import ConlluSource
from fieldspring.sources.plaintext import PlaintextSource

__all__ = [
    "ConlluSource",
    "PlaintextSource",
]
