"""Gazetteer lookup recognizer.

Tags every token run that exactly matches a name from a fixed list. At
each position the longest matching name wins and scanning resumes after
it, so the spans of one call never overlap.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Iterable, Sequence

from fieldspring.config import LOCATION_GAZETTEER, ResourceLocator, Settings
from fieldspring.core.spans import NamedEntityType, Span
from fieldspring.errors import ModelLoadError, ResourceNotFoundError

logger = logging.getLogger(__name__)


class GazetteerRecognizer:
    """Recognize names from a gazetteer by longest exact token match.

    Multi-word names are matched token by token, so ``"New York"`` matches
    the tokens ``["New", "York"]``.

    Example:
        >>> recognizer = GazetteerRecognizer({"Paris", "France"})
        >>> spans = recognizer.recognize(["Paris", "is", "in", "France", "."])
        >>> [(s.start, s.end) for s in sorted(spans)]
        [(0, 1), (3, 4)]
    """

    def __init__(
        self,
        names: Iterable[str],
        entity_type: NamedEntityType = NamedEntityType.LOCATION,
        ignore_case: bool = False,
    ):
        """Build the lookup table.

        Args:
            names: Gazetteer entries. Whitespace separates tokens within an
                entry; blank entries are ignored.
            entity_type: Type tagged on every span.
            ignore_case: If True, match case-insensitively.
        """
        self._entity_type = entity_type
        self._ignore_case = ignore_case

        entries = set()
        for name in names:
            key = tuple(self._fold(part) for part in name.split())
            if key:
                entries.add(key)
        self._entries = frozenset(entries)
        self._max_length = max((len(key) for key in self._entries), default=0)

    @classmethod
    def from_stream(
        cls,
        stream: IO,
        entity_type: NamedEntityType = NamedEntityType.LOCATION,
        ignore_case: bool = False,
    ) -> "GazetteerRecognizer":
        """Load names from a stream, one per line.

        Text or binary (UTF-8) streams are accepted. Blank lines and lines
        starting with ``#`` are skipped; anything after a tab is ignored,
        so tab-separated gazetteer dumps work as is.

        Raises:
            ModelLoadError: If the stream is missing, unreadable, or holds
                no names.
        """
        if stream is None:
            raise ModelLoadError("No gazetteer stream given")
        try:
            raw = stream.read()
        except OSError as exc:
            raise ModelLoadError(f"Error while reading gazetteer: {exc}") from exc

        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise ModelLoadError(f"Gazetteer is not valid UTF-8: {exc}") from exc

        names = []
        for line in raw.splitlines():
            name = line.split("\t", 1)[0].strip()
            if name and not name.startswith("#"):
                names.append(name)

        if not names:
            raise ModelLoadError("Gazetteer contains no names")

        logger.debug("Loaded %d gazetteer names", len(names))
        return cls(names, entity_type=entity_type, ignore_case=ignore_case)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        entity_type: NamedEntityType = NamedEntityType.LOCATION,
        ignore_case: bool = False,
        encoding: str = "utf-8",
    ) -> "GazetteerRecognizer":
        """Load names from a gazetteer file."""
        try:
            with open(path, encoding=encoding) as f:
                return cls.from_stream(f, entity_type=entity_type, ignore_case=ignore_case)
        except OSError as exc:
            raise ModelLoadError(f"Cannot open gazetteer {path}: {exc}") from exc

    @classmethod
    def default(
        cls,
        settings: Settings | None = None,
        ignore_case: bool = False,
    ) -> "GazetteerRecognizer":
        """Load the location gazetteer from the configured gazetteers directory."""
        try:
            path = ResourceLocator(settings).gazetteer_path(LOCATION_GAZETTEER)
        except ResourceNotFoundError as exc:
            raise ModelLoadError(str(exc)) from exc
        return cls.from_file(path, NamedEntityType.LOCATION, ignore_case=ignore_case)

    @property
    def entity_type(self) -> NamedEntityType:
        return self._entity_type

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"GazetteerRecognizer({len(self)} names, {self._entity_type.name})"

    def _fold(self, token: str) -> str:
        return token.lower() if self._ignore_case else token

    def recognize(self, tokens: Sequence[str]) -> set[Span[NamedEntityType]]:
        """Return spans of tokens matching gazetteer names."""
        forms = [self._fold(token) for token in tokens]
        spans: set[Span[NamedEntityType]] = set()

        i = 0
        while i < len(forms):
            longest = min(self._max_length, len(forms) - i)
            for length in range(longest, 0, -1):
                if tuple(forms[i:i + length]) in self._entries:
                    spans.add(Span(i, i + length, self._entity_type))
                    i += length
                    break
            else:
                i += 1

        return spans
