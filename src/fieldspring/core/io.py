"""Fail-soft line reading over character streams.

A LineReader owns one text stream and hands it out line by line. Read
faults are logged and reported as end of input rather than raised, so a
damaged file shortens a corpus run instead of aborting it. Pass
``strict=True`` to have the fault re-raised after logging.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Iterator, TextIO

logger = logging.getLogger(__name__)

_TERMINATORS = "\r\n"


class LineReader:
    """Read lines from a text stream, returning ``None`` at end of input.

    Example:
        >>> reader = LineReader.from_string("arma\\nvirumque\\n")
        >>> reader.read_line()
        'arma'
        >>> list(reader)
        ['virumque']
        >>> reader.read_line() is None
        True
    """

    def __init__(
        self,
        stream: TextIO,
        *,
        name: str | None = None,
        strict: bool = False,
    ):
        """Wrap an open text stream.

        Args:
            stream: Any object with ``readline()`` and ``close()``.
            name: Label used in log messages. Defaults to the stream's name.
            strict: If True, read faults are re-raised after logging.
        """
        self._stream = stream
        self._name = name or str(getattr(stream, "name", "<stream>"))
        self._strict = strict
        self._closed = False
        self._exhausted = False
        self._lines_read = 0

    @classmethod
    def open(
        cls,
        path: str | Path,
        encoding: str = "utf-8",
        strict: bool = False,
    ) -> "LineReader":
        """Open a file for reading. Raises OSError if it cannot be opened."""
        path = Path(path)
        return cls(path.open(encoding=encoding, newline=""), name=str(path), strict=strict)

    @classmethod
    def from_string(cls, text: str, name: str = "<string>", strict: bool = False) -> "LineReader":
        """Read from an in-memory buffer."""
        return cls(io.StringIO(text, newline=""), name=name, strict=strict)

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def lines_read(self) -> int:
        """Number of lines returned so far."""
        return self._lines_read

    def read_line(self) -> str | None:
        """Return the next line without its terminator, or None at end of input.

        An I/O fault, a decode error, or a stream closed by someone else is
        logged and treated as end of input, and the reader stays exhausted
        afterwards. In strict mode the fault propagates.
        """
        if self._closed or self._exhausted:
            return None

        try:
            line = self._stream.readline()
        except (OSError, ValueError) as exc:
            self._exhausted = True
            logger.warning(
                "Error while reading %s after %d lines: %s",
                self._name, self._lines_read, exc,
            )
            if self._strict:
                raise
            return None

        if not line:
            self._exhausted = True
            return None

        self._lines_read += 1
        return line.rstrip(_TERMINATORS)

    def close(self) -> None:
        """Release the stream. Never raises; repeated calls do nothing."""
        if self._closed:
            return
        self._closed = True
        try:
            self._stream.close()
        except OSError as exc:
            logger.warning("Error while closing %s: %s", self._name, exc)
        else:
            logger.debug("Closed %s after %d lines", self._name, self._lines_read)

    def __iter__(self) -> Iterator[str]:
        while (line := self.read_line()) is not None:
            yield line

    def __enter__(self) -> "LineReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"LineReader({self._name!r}, {state})"
