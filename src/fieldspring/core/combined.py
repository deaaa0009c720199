"""Chain several document sources into one.

CombinedSource pulls from its sources in order. Sources given as factories
are only opened when the previous one is exhausted and closed, so a corpus
of many files never holds more than one file open.

Example:
    >>> from fieldspring.core.combined import open_corpus
    >>> with open_corpus("/data/news", "**/*.txt") as corpus:
    ...     for doc in corpus:
    ...         print(doc._.docid)
"""

from __future__ import annotations

import logging
import re
from collections import deque
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Union

from fieldspring.core.protocols import DocumentSourceProtocol
from fieldspring.errors import SourceClosedError

if TYPE_CHECKING:
    from spacy.tokens import Doc

    from fieldspring.core.source import DocumentSource

logger = logging.getLogger(__name__)

SourceOrFactory = Union[DocumentSourceProtocol, Callable[[], DocumentSourceProtocol]]


class CombinedSource:
    """Sequential composition of document sources.

    Args:
        *sources: Sources, or zero-argument callables returning sources.
            Callables are invoked lazily, one at a time.
    """

    def __init__(self, *sources: SourceOrFactory):
        self._pending: deque[SourceOrFactory] = deque(sources)
        self._current: DocumentSourceProtocol | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"CombinedSource({len(self._pending)} pending, {state})"

    def _open_next(self) -> bool:
        """Advance to the next pending source. Return False if none remain."""
        if not self._pending:
            return False
        item = self._pending.popleft()
        if isinstance(item, DocumentSourceProtocol):
            self._current = item
        else:
            self._current = item()
        logger.debug("Opened %r", self._current)
        return True

    def __iter__(self) -> "CombinedSource":
        return self

    def __next__(self) -> "Doc":
        if self._closed:
            raise SourceClosedError(
                "Cannot read from a closed CombinedSource. "
                "Create a new one to read again."
            )
        while True:
            if self._current is None and not self._open_next():
                raise StopIteration
            try:
                return next(self._current)
            except StopIteration:
                self._current.close()
                self._current = None

    def next_document(self) -> "Doc | None":
        """Return the next Doc, or None when every source is exhausted."""
        return next(self, None)

    def close(self) -> None:
        """Close the current source and any pending source instances."""
        if self._closed:
            return
        self._closed = True
        current, self._current = self._current, None
        pending = [p for p in self._pending if isinstance(p, DocumentSourceProtocol)]
        self._pending.clear()
        try:
            if current is not None:
                current.close()
        finally:
            for source in pending:
                source.close()

    def __enter__(self) -> "CombinedSource":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def corpus_files(
    root: str | Path,
    pattern: str = "**/*.txt",
    match: str | None = None,
) -> list[Path]:
    """Return files under ``root`` matching a glob, in natural order.

    Args:
        root: Directory to search.
        pattern: Glob pattern relative to root.
        match: Optional regex to filter relative paths (case-insensitive).

    Returns:
        Naturally sorted paths (part.2 before part.10).
    """
    from natsort import natsorted

    root = Path(root)
    files = [f for f in root.glob(pattern) if f.is_file()]

    if match:
        regex = re.compile(match, re.IGNORECASE)
        files = [f for f in files if regex.search(str(f.relative_to(root)))]

    return natsorted(files, key=lambda f: str(f.relative_to(root)))


def open_corpus(
    root: str | Path,
    pattern: str = "**/*.txt",
    source_cls: type[DocumentSource] | None = None,
    encoding: str = "utf-8",
    strict: bool = False,
    match: str | None = None,
    **kwargs: Any,
) -> CombinedSource:
    """Build a CombinedSource over every matching file under ``root``.

    Args:
        root: Corpus directory.
        pattern: Glob pattern selecting files.
        source_cls: DocumentSource subclass for each file. Defaults to
            PlaintextSource.
        encoding: Text encoding of the files.
        strict: If True, read faults raise instead of ending a file early.
        match: Optional regex filter on relative paths.
        **kwargs: Passed on to each source's constructor.
    """
    if source_cls is None:
        from fieldspring.sources.plaintext import PlaintextSource

        source_cls = PlaintextSource

    factories = [
        partial(source_cls.from_path, path, encoding=encoding, strict=strict, **kwargs)
        for path in corpus_files(root, pattern, match)
    ]
    return CombinedSource(*factories)

