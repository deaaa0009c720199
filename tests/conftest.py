"""Pytest fixtures for fieldspring tests."""

import io

import pytest
import spacy
from pathlib import Path

from fieldspring import NamedEntityType, SpacyRecognizer


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def plaintext_dir(fixtures_dir) -> Path:
    """Path to plaintext test fixtures."""
    return fixtures_dir / "plaintext"


@pytest.fixture
def sample_conllu_file(fixtures_dir) -> Path:
    """Path to sample .conllu file with two documents."""
    return fixtures_dir / "conllu" / "sample.conllu"


@pytest.fixture
def gazetteers_dir(fixtures_dir) -> Path:
    """Path to gazetteer fixtures."""
    return fixtures_dir / "gazetteers"


@pytest.fixture
def tokens() -> list[str]:
    """Tokens of the running example sentence."""
    return ["Paris", "is", "in", "France", "."]


@pytest.fixture
def ruler_nlp():
    """Blank English pipeline whose entity_ruler tags a few names."""
    nlp = spacy.blank("en")
    ruler = nlp.add_pipe("entity_ruler")
    ruler.add_patterns([
        {"label": "GPE", "pattern": "Paris"},
        {"label": "GPE", "pattern": "France"},
        {"label": "LOC", "pattern": [{"ORTH": "New"}, {"ORTH": "York"}]},
        {"label": "PERSON", "pattern": "Victor"},
        {"label": "ORG", "pattern": "UNESCO"},
    ])
    return nlp


@pytest.fixture
def model_bytes(ruler_nlp) -> bytes:
    """Serialized location model blob."""
    buffer = io.BytesIO()
    SpacyRecognizer.dump(ruler_nlp, buffer)
    return buffer.getvalue()


@pytest.fixture
def models_dir(tmp_path, model_bytes) -> Path:
    """Models directory containing the canonical location model."""
    directory = tmp_path / "data" / "models"
    directory.mkdir(parents=True)
    (directory / "en-ner-location.bin").write_bytes(model_bytes)
    return directory


@pytest.fixture
def location_recognizer(model_bytes) -> SpacyRecognizer:
    """SpacyRecognizer for LOCATION loaded from the blob."""
    return SpacyRecognizer(io.BytesIO(model_bytes), NamedEntityType.LOCATION)


class FaultyStream:
    """Text stream that fails after a number of good lines.

    Args:
        lines: Lines returned before the fault (without newlines).
        fail_on_close: If True, close() raises OSError too.
    """

    def __init__(self, lines, fail_on_close=False, error=None):
        self._lines = [line + "\n" for line in lines]
        self._fail_on_close = fail_on_close
        self._error = error or OSError("disk went away")
        self.name = "faulty"
        self.close_calls = 0

    def readline(self):
        if self._lines:
            return self._lines.pop(0)
        raise self._error

    def close(self):
        self.close_calls += 1
        if self._fail_on_close:
            raise OSError("cannot close")


@pytest.fixture
def faulty_stream_factory():
    """Factory for FaultyStream instances."""
    return FaultyStream
