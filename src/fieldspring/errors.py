"""Exception hierarchy for fieldspring.

Everything raised deliberately by the package derives from FieldspringError,
so callers can catch the whole family at once. Each subclass also derives
from the closest builtin so that existing ``except ValueError`` style
handlers keep working.
"""

from __future__ import annotations


class FieldspringError(Exception):
    """Base class for all fieldspring errors."""


class InvalidRangeError(FieldspringError, ValueError):
    """A Span was constructed with a negative bound or start >= end."""


class ModelLoadError(FieldspringError):
    """A recognizer model could not be located, read, or validated."""


class SourceClosedError(FieldspringError, RuntimeError):
    """A DocumentSource was pulled from after close()."""


class ResourceNotFoundError(FieldspringError, FileNotFoundError):
    """No configured fallback produced a resource directory."""
