"""Resource directory configuration.

Model and gazetteer directories are resolved through fallback chains over
a Settings snapshot rather than by reading the process environment at
arbitrary points. Build the snapshot once at startup with
``Settings.from_env()`` and pass it to ResourceLocator and to recognizer
constructors, or build one by hand in tests.

Models directory, first non-empty wins:
    1. OPENNLP_MODELS environment variable
    2. ``opennlp.models`` property
    3. $FIELDSPRING_DIR/data/models

Gazetteers directory:
    1. FIELDSPRING_DATA environment variable, returned as is
    2. the relative path data/gazetteers

The gazetteers chain is deliberately not symmetric with the models chain.
Its ``gazetteers`` property and $FIELDSPRING_DIR/data/gazetteers fallbacks
only apply if the relative default is configured away (``default_data``
set to an empty string).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from fieldspring.errors import ResourceNotFoundError

ENV_FIELDSPRING_DIR = "FIELDSPRING_DIR"
ENV_OPENNLP_MODELS = "OPENNLP_MODELS"
ENV_FIELDSPRING_DATA = "FIELDSPRING_DATA"

PROP_MODELS = "opennlp.models"
PROP_GAZETTEERS = "gazetteers"

DEFAULT_DATA = "data"
LOCATION_MODEL = "en-ner-location.bin"
LOCATION_GAZETTEER = "locations.txt"


def _first(*candidates: str | None) -> str | None:
    """Return the first candidate that is neither None nor empty."""
    for candidate in candidates:
        if candidate:
            return candidate
    return None


@dataclass(frozen=True)
class Settings:
    """Snapshot of everything that influences resource resolution.

    Attributes:
        fieldspring_dir: Base installation directory (FIELDSPRING_DIR).
        opennlp_models: Explicit models directory (OPENNLP_MODELS).
        fieldspring_data: Explicit gazetteers directory (FIELDSPRING_DATA).
        properties: Process-wide property overrides, such as
            ``{"opennlp.models": "/srv/models"}``.
        default_data: Relative data directory used for the gazetteers default.
    """

    fieldspring_dir: str | None = None
    opennlp_models: str | None = None
    fieldspring_data: str | None = None
    properties: Mapping[str, str] = field(default_factory=dict)
    default_data: str = DEFAULT_DATA

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        properties: Mapping[str, str] | None = None,
    ) -> "Settings":
        """Read settings from the environment.

        Args:
            environ: Mapping to read instead of os.environ.
            properties: Property overrides to carry along.
        """
        if environ is None:
            environ = os.environ
        return cls(
            fieldspring_dir=environ.get(ENV_FIELDSPRING_DIR),
            opennlp_models=environ.get(ENV_OPENNLP_MODELS),
            fieldspring_data=environ.get(ENV_FIELDSPRING_DATA),
            properties=dict(properties or {}),
        )


class ResourceLocator:
    """Resolve resource directories from a Settings snapshot.

    Resolution is a pure function of the settings: nothing is cached and
    nothing on disk is checked or created.

    Example:
        >>> locator = ResourceLocator(Settings(fieldspring_dir="/opt/fieldspring"))
        >>> locator.resolve_models_directory()
        PosixPath('/opt/fieldspring/data/models')
    """

    def __init__(self, settings: Settings | None = None):
        self._settings = settings if settings is not None else Settings.from_env()

    @property
    def settings(self) -> Settings:
        return self._settings

    def resolve_models_directory(self) -> Path:
        """Return the directory holding recognizer models.

        Raises:
            ResourceNotFoundError: If no override is set and FIELDSPRING_DIR
                is unset, so no default can be computed.
        """
        s = self._settings
        explicit = _first(s.opennlp_models, s.properties.get(PROP_MODELS))
        if explicit:
            return Path(explicit)
        if not s.fieldspring_dir:
            raise ResourceNotFoundError(
                "Cannot locate the models directory. "
                f"Set {ENV_OPENNLP_MODELS} or {ENV_FIELDSPRING_DIR}, "
                f"or pass the {PROP_MODELS!r} property."
            )
        return Path(s.fieldspring_dir) / "data" / "models"

    def resolve_gazetteers_directory(self) -> Path:
        """Return the directory holding gazetteer files.

        Raises:
            ResourceNotFoundError: If every fallback is empty.
        """
        s = self._settings
        relative_default = (
            str(Path(s.default_data) / "gazetteers") if s.default_data else None
        )
        computed = (
            str(Path(s.fieldspring_dir) / "data" / "gazetteers")
            if s.fieldspring_dir
            else None
        )
        directory = _first(
            s.fieldspring_data,
            relative_default,
            s.properties.get(PROP_GAZETTEERS),
            computed,
        )
        if directory is None:
            raise ResourceNotFoundError(
                "Cannot locate the gazetteers directory. "
                f"Set {ENV_FIELDSPRING_DATA} or {ENV_FIELDSPRING_DIR}, "
                f"or pass the {PROP_GAZETTEERS!r} property."
            )
        return Path(directory)

    def model_path(self, name: str = LOCATION_MODEL) -> Path:
        """Path of a named model file inside the models directory."""
        return self.resolve_models_directory() / name

    def gazetteer_path(self, name: str = LOCATION_GAZETTEER) -> Path:
        """Path of a named gazetteer file inside the gazetteers directory."""
        return self.resolve_gazetteers_directory() / name
