"""Tests for GazetteerRecognizer."""

import io
from concurrent.futures import ThreadPoolExecutor

import pytest

from fieldspring import GazetteerRecognizer, ModelLoadError, NamedEntityType, Recognizer, Settings, Span

LOC = NamedEntityType.LOCATION


class TestRecognize:
    """Recognition behaviour."""

    @pytest.fixture
    def recognizer(self):
        return GazetteerRecognizer({"Paris", "France", "New York", "York"})

    def test_flags_gazetteer_tokens(self, recognizer, tokens):
        assert recognizer.recognize(tokens) == {Span(0, 1, LOC), Span(3, 4, LOC)}

    def test_empty_input(self, recognizer):
        assert recognizer.recognize([]) == set()

    def test_longest_match_wins(self, recognizer):
        spans = recognizer.recognize(["I", "love", "New", "York", "."])
        assert spans == {Span(2, 4, LOC)}

    def test_spans_do_not_overlap(self, recognizer):
        spans = sorted(recognizer.recognize(["New", "York", "York", "Paris"]))
        for a, b in zip(spans, spans[1:]):
            assert not a.overlaps(b)

    def test_spans_within_bounds_and_typed(self, recognizer):
        tokens = ["York", "New", "York", "Paris", "France"]
        for span in recognizer.recognize(tokens):
            assert 0 <= span.start < span.end <= len(tokens)
            assert span.type is recognizer.entity_type

    def test_deterministic(self, recognizer, tokens):
        assert recognizer.recognize(tokens) == recognizer.recognize(tokens)

    def test_case_sensitive_by_default(self, recognizer):
        assert recognizer.recognize(["paris"]) == set()

    def test_ignore_case(self):
        recognizer = GazetteerRecognizer({"Paris"}, ignore_case=True)
        assert recognizer.recognize(["PARIS"]) == {Span(0, 1, LOC)}

    def test_custom_type(self):
        recognizer = GazetteerRecognizer({"Victor", "Hugo"}, NamedEntityType.PERSON)
        spans = recognizer.recognize(["Victor", "Hugo"])
        assert {s.type for s in spans} == {NamedEntityType.PERSON}

    def test_empty_gazetteer_matches_nothing(self, tokens):
        assert GazetteerRecognizer([]).recognize(tokens) == set()

    def test_satisfies_protocol(self, recognizer):
        assert isinstance(recognizer, Recognizer)

    def test_concurrent_use(self, recognizer, tokens):
        expected = recognizer.recognize(tokens)
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: recognizer.recognize(tokens), range(50)))
        assert all(result == expected for result in results)


class TestLoading:
    """from_stream(), from_file() and default()."""

    def test_from_text_stream(self, tokens):
        stream = io.StringIO("# comment\nParis\n\nFrance\tFR\n")
        recognizer = GazetteerRecognizer.from_stream(stream)
        assert len(recognizer) == 2
        assert recognizer.recognize(tokens) == {Span(0, 1, LOC), Span(3, 4, LOC)}

    def test_from_binary_stream(self):
        recognizer = GazetteerRecognizer.from_stream(io.BytesIO("Zürich\n".encode("utf-8")))
        assert recognizer.recognize(["Zürich"]) == {Span(0, 1, LOC)}

    def test_missing_stream(self):
        with pytest.raises(ModelLoadError, match="No gazetteer"):
            GazetteerRecognizer.from_stream(None)

    def test_empty_stream(self):
        with pytest.raises(ModelLoadError, match="no names"):
            GazetteerRecognizer.from_stream(io.StringIO("# nothing\n\n"))

    def test_invalid_utf8(self):
        with pytest.raises(ModelLoadError, match="UTF-8"):
            GazetteerRecognizer.from_stream(io.BytesIO(b"\xff\xfe"))

    def test_unreadable_stream(self, faulty_stream_factory):
        stream = faulty_stream_factory([])
        stream.read = stream.readline
        with pytest.raises(ModelLoadError, match="Error while reading"):
            GazetteerRecognizer.from_stream(stream)

    def test_from_file(self, gazetteers_dir):
        recognizer = GazetteerRecognizer.from_file(gazetteers_dir / "locations.txt")
        spans = recognizer.recognize(["New", "York", "and", "Berlin"])
        assert spans == {Span(0, 2, LOC), Span(3, 4, LOC)}

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(ModelLoadError, match="Cannot open gazetteer"):
            GazetteerRecognizer.from_file(tmp_path / "missing.txt")

    def test_default_uses_fieldspring_data(self, gazetteers_dir, tokens):
        settings = Settings(fieldspring_data=str(gazetteers_dir))
        recognizer = GazetteerRecognizer.default(settings)
        assert recognizer.entity_type is LOC
        assert recognizer.recognize(tokens) == {Span(0, 1, LOC), Span(3, 4, LOC)}

    def test_default_missing_gazetteer(self, tmp_path):
        settings = Settings(fieldspring_data=str(tmp_path))
        with pytest.raises(ModelLoadError):
            GazetteerRecognizer.default(settings)
