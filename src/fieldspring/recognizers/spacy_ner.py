"""Recognizer adapter over a serialized spaCy pipeline.

The model blob is a msgpack mapping written by ``SpacyRecognizer.dump``:

    {"format": "fieldspring-spacy", "version": 1,
     "config": <pipeline config string>, "model": <nlp.to_bytes() payload>}

Any pipeline that sets ``doc.ents`` works: a trained ``ner`` component,
an ``entity_ruler``, or both.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import IO, TYPE_CHECKING, Iterable, Sequence

import spacy
import srsly
from spacy.tokens import Doc

from fieldspring.config import LOCATION_MODEL, ResourceLocator, Settings
from fieldspring.core.spans import NamedEntityType, Span
from fieldspring.errors import ModelLoadError, ResourceNotFoundError

if TYPE_CHECKING:
    from spacy import Language

logger = logging.getLogger(__name__)

MODEL_FORMAT = "fieldspring-spacy"
MODEL_VERSION = 1

# spaCy entity labels that count as each category
DEFAULT_LABELS: dict[NamedEntityType, frozenset[str]] = {
    NamedEntityType.LOCATION: frozenset({"GPE", "LOC", "FAC", "LOCATION"}),
    NamedEntityType.PERSON: frozenset({"PERSON", "PER"}),
    NamedEntityType.ORGANIZATION: frozenset({"ORG", "ORGANIZATION"}),
}


class SpacyRecognizer:
    """Recognize entities with a spaCy pipeline restored from a byte stream.

    The token sequence is turned into a Doc as given, without re-tokenizing,
    so span offsets index directly into the caller's tokens.

    Example:
        >>> with open("en-ner-location.bin", "rb") as f:
        ...     recognizer = SpacyRecognizer(f, NamedEntityType.LOCATION)
        >>> recognizer.recognize(["Paris", "is", "in", "France", "."])
        {Span(start=0, end=1, ...), Span(start=3, end=4, ...)}
    """

    def __init__(
        self,
        stream: IO[bytes],
        entity_type: NamedEntityType = NamedEntityType.LOCATION,
        labels: Iterable[str] | None = None,
    ):
        """Load the pipeline from ``stream``.

        Args:
            stream: Binary stream holding a blob written by dump().
            entity_type: Type tagged on every span.
            labels: spaCy entity labels to keep. Defaults to the labels
                conventionally used for ``entity_type``.

        Raises:
            ModelLoadError: If the blob is missing, unreadable, of the wrong
                format or version, or the pipeline cannot be rebuilt.
        """
        self._nlp = self._load(stream)
        self._zone_lock = threading.Lock()
        self._entity_type = entity_type
        self._labels = frozenset(labels) if labels is not None else DEFAULT_LABELS[entity_type]

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        entity_type: NamedEntityType = NamedEntityType.LOCATION,
        labels: Iterable[str] | None = None,
    ) -> "SpacyRecognizer":
        """Load a recognizer from a model file."""
        try:
            with open(path, "rb") as f:
                return cls(f, entity_type=entity_type, labels=labels)
        except OSError as exc:
            raise ModelLoadError(f"Cannot open model {path}: {exc}") from exc

    @classmethod
    def default(cls, settings: Settings | None = None) -> "SpacyRecognizer":
        """Load the location model from the configured models directory."""
        try:
            path = ResourceLocator(settings).model_path(LOCATION_MODEL)
        except ResourceNotFoundError as exc:
            raise ModelLoadError(str(exc)) from exc
        return cls.from_file(path, NamedEntityType.LOCATION)

    @staticmethod
    def dump(nlp: Language, stream: IO[bytes]) -> None:
        """Serialize ``nlp`` into the blob format read by the constructor."""
        payload = {
            "format": MODEL_FORMAT,
            "version": MODEL_VERSION,
            "config": nlp.config.to_str(),
            "model": nlp.to_bytes(),
        }
        stream.write(srsly.msgpack_dumps(payload))

    @staticmethod
    def _load(stream: IO[bytes]) -> Language:
        if stream is None:
            raise ModelLoadError("No model stream given")
        try:
            data = stream.read()
        except OSError as exc:
            raise ModelLoadError(f"Error while reading model: {exc}") from exc
        if not data:
            raise ModelLoadError("Model stream is empty")

        try:
            payload = srsly.msgpack_loads(data)
        except Exception as exc:
            raise ModelLoadError(f"Model is not a valid msgpack blob: {exc}") from exc

        if not isinstance(payload, dict) or payload.get("format") != MODEL_FORMAT:
            raise ModelLoadError(f"Model is not a {MODEL_FORMAT} blob")
        if payload.get("version") != MODEL_VERSION:
            raise ModelLoadError(
                f"Unsupported model version {payload.get('version')!r}, "
                f"expected {MODEL_VERSION}"
            )

        try:
            config = spacy.util.load_config_from_str(payload["config"])
            lang_cls = spacy.util.get_lang_class(config["nlp"]["lang"])
            nlp = lang_cls.from_config(config)
            nlp.from_bytes(payload["model"])
        except Exception as exc:
            raise ModelLoadError(f"Cannot rebuild spaCy pipeline: {exc}") from exc

        logger.debug("Loaded spaCy pipeline with components %s", nlp.pipe_names)
        return nlp

    @property
    def entity_type(self) -> NamedEntityType:
        return self._entity_type

    @property
    def labels(self) -> frozenset[str]:
        return self._labels

    def __repr__(self) -> str:
        return f"SpacyRecognizer({self._nlp.pipe_names}, {self._entity_type.name})"

    def recognize(self, tokens: Sequence[str]) -> set[Span[NamedEntityType]]:
        """Return spans of entities whose label maps to this recognizer's type."""
        if not tokens:
            return set()

        # Strings interned for this call are dropped when the zone exits,
        # so the Doc must not outlive it. Zones share the vocab, one at a time.
        with self._zone_lock, self._nlp.memory_zone():
            doc = Doc(self._nlp.vocab, words=list(tokens))
            for _name, component in self._nlp.pipeline:
                doc = component(doc)
            bounds = [
                (ent.start, ent.end)
                for ent in doc.ents
                if ent.label_ in self._labels
            ]

        return {Span(start, end, self._entity_type) for start, end in bounds}
