"""Universal Dependencies (CoNLL-U) document source.

Reads pre-tokenized text in CoNLL-U format. Tokenization and annotations
(lemma, POS, morphology) are taken directly from the file rather than
produced by a tokenizer, so recognizer spans line up with the treebank's
own token indices.

CoNLL-U format (10 tab-separated columns):
    1. ID - Word index
    2. FORM - Word form
    3. LEMMA - Lemma
    4. UPOS - Universal POS tag
    5. XPOS - Language-specific POS tag
    6. FEATS - Morphological features
    7. HEAD - Head word index
    8. DEPREL - Dependency relation
    9. DEPS - Enhanced dependencies
    10. MISC - Miscellaneous

Documents are delimited by ``# newdoc`` comments. Input without any
``# newdoc`` comment is read as a single document.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from spacy.tokens import Token

from fieldspring.core.io import LineReader
from fieldspring.core.source import DocumentSource

if TYPE_CHECKING:
    from spacy import Language
    from spacy.tokens import Doc


# Register UD-specific token extensions
def _register_ud_extensions() -> None:
    """Register spaCy custom extensions for UD annotations."""
    extensions = [
        ("ud_id", None),      # Original token ID from file
        ("ud_feats", None),   # Morphological features dict
        ("ud_head", None),    # Head index from file
        ("ud_deprel", None),  # Dependency relation from file
        ("ud_misc", None),    # Miscellaneous field
    ]
    for name, default in extensions:
        if not Token.has_extension(name):
            Token.set_extension(name, default=default)


_register_ud_extensions()


@dataclass
class UDToken:
    """A single token line from a CoNLL-U file."""

    id: str  # Can be "1", "1-2" for MWT, or "1.1" for empty nodes
    form: str
    lemma: str
    upos: str
    xpos: str
    feats: dict[str, str] = field(default_factory=dict)
    head: str | None = None
    deprel: str | None = None
    misc: dict[str, str] = field(default_factory=dict)

    @property
    def is_multiword(self) -> bool:
        """Check if this is a multi-word token range (e.g., '1-2')."""
        return "-" in self.id

    @property
    def is_empty_node(self) -> bool:
        """Check if this is an empty node (e.g., '1.1')."""
        return "." in self.id

    @property
    def space_after(self) -> bool:
        return self.misc.get("SpaceAfter", "Yes") != "No"


@dataclass
class UDSentence:
    """A sentence from a CoNLL-U file."""

    tokens: list[UDToken]
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def words(self) -> list[UDToken]:
        """Syntactic words, without MWT ranges or empty nodes."""
        return [t for t in self.tokens if not t.is_multiword and not t.is_empty_node]

    @property
    def sent_id(self) -> str | None:
        return self.metadata.get("sent_id")


SEGMENTATIONS = ("newdoc", "sentence")


class ConlluSource(DocumentSource):
    """Source for CoNLL-U files, one Doc per ``# newdoc`` block or sentence.

    Example:
        >>> with ConlluSource.from_path("en_ewt-ud-test.conllu") as source:
        ...     for doc in source:
        ...         print(doc._.metadata.get("newdoc_id"), len(list(doc.sents)))
    """

    COMMENT_PATTERN = re.compile(r"^#\s*(\S+)\s*=\s*(.*)$")
    NEWDOC_PATTERN = re.compile(r"^#\s*newdoc\b(?:\s+id\s*=\s*(.*))?$")

    def __init__(
        self,
        reader: LineReader,
        segment_by: str = "newdoc",
        lang: str = "en",
        nlp: Language | None = None,
    ):
        """Initialize the CoNLL-U source.

        Args:
            reader: LineReader to pull from.
            segment_by: "newdoc" to group sentences by ``# newdoc`` comments,
                or "sentence" for one Doc per sentence.
            lang: Language code whose vocab the Docs are built with.
            nlp: Ready-made pipeline supplying the vocab.
        """
        if segment_by not in SEGMENTATIONS:
            raise ValueError(
                f"Unknown segmentation {segment_by!r}. "
                f"Use one of: {', '.join(SEGMENTATIONS)}"
            )
        super().__init__(reader, lang=lang, nlp=nlp)
        self._segment_by = segment_by

    @property
    def segment_by(self) -> str:
        return self._segment_by

    def _parse_feats(self, feats_str: str) -> dict[str, str]:
        """Parse a Key=Value|Key=Value column into a dict."""
        if feats_str == "_" or not feats_str:
            return {}
        result = {}
        for pair in feats_str.split("|"):
            if "=" in pair:
                key, value = pair.split("=", 1)
                result[key] = value
        return result

    def _parse_token_line(self, line: str) -> UDToken | None:
        """Parse a single token line, or return None if it is malformed."""
        parts = line.split("\t")
        if len(parts) < 2:
            return None
        if len(parts) < 10:
            parts.extend(["_"] * (10 - len(parts)))

        return UDToken(
            id=parts[0],
            form=parts[1],
            lemma=parts[2] if parts[2] != "_" else parts[1],
            upos=parts[3] if parts[3] != "_" else "",
            xpos=parts[4] if parts[4] != "_" else "",
            feats=self._parse_feats(parts[5]),
            head=parts[6] if parts[6] != "_" else None,
            deprel=parts[7] if parts[7] != "_" else None,
            misc=self._parse_feats(parts[9]),
        )

    def _iter_sentences(self) -> Iterator[tuple[UDSentence, str | None]]:
        """Yield (sentence, newdoc_id) pairs pulled from the reader.

        ``newdoc_id`` is None for sentences that do not open a new document,
        and the empty string for ``# newdoc`` comments without an id.
        """
        tokens: list[UDToken] = []
        metadata: dict[str, str] = {}
        newdoc: str | None = None

        while (line := self._read_line()) is not None:
            line = line.rstrip()

            if not line:
                # Blank line = end of sentence
                if tokens:
                    yield UDSentence(tokens=tokens, metadata=metadata), newdoc
                    tokens, metadata, newdoc = [], {}, None
                continue

            if line.startswith("#"):
                if match := self.NEWDOC_PATTERN.match(line):
                    newdoc = (match.group(1) or "").strip()
                elif match := self.COMMENT_PATTERN.match(line):
                    metadata[match.group(1)] = match.group(2).strip()
                continue

            if token := self._parse_token_line(line):
                tokens.append(token)

        # Handle input not ending with a blank line
        if tokens:
            yield UDSentence(tokens=tokens, metadata=metadata), newdoc

    def _iter_documents(self) -> Iterator["Doc"]:
        if self._segment_by == "sentence":
            for sentence, newdoc in self._iter_sentences():
                yield self._create_doc([sentence], newdoc)
            return

        pending: list[UDSentence] = []
        pending_id: str | None = None
        for sentence, newdoc in self._iter_sentences():
            if newdoc is not None and pending:
                yield self._create_doc(pending, pending_id)
                pending = []
            if not pending:
                pending_id = newdoc
            pending.append(sentence)

        if pending:
            yield self._create_doc(pending, pending_id)

    def _create_doc(self, sentences: list[UDSentence], newdoc_id: str | None) -> "Doc":
        """Create a Doc from sentences, keeping the file's tokenization."""
        words: list[str] = []
        spaces: list[bool] = []
        sent_starts: list[bool] = []
        token_data: list[UDToken] = []

        for sent in sentences:
            for tok_idx, token in enumerate(sent.words):
                words.append(token.form)
                spaces.append(token.space_after)
                sent_starts.append(tok_idx == 0)
                token_data.append(token)

        metadata = {
            "n_sentences": len(sentences),
            "sent_ids": [s.sent_id for s in sentences if s.sent_id],
        }
        if newdoc_id:
            metadata["newdoc_id"] = newdoc_id

        doc = self._make_doc_from_words(words, spaces, sent_starts, metadata)

        for token, ud_token in zip(doc, token_data):
            token.lemma_ = ud_token.lemma
            if ud_token.upos:
                token.pos_ = ud_token.upos
            if ud_token.xpos:
                token.tag_ = ud_token.xpos
            if ud_token.feats:
                token.set_morph("|".join(f"{k}={v}" for k, v in ud_token.feats.items()))

            token._.ud_id = ud_token.id
            token._.ud_feats = ud_token.feats
            token._.ud_head = ud_token.head
            token._.ud_deprel = ud_token.deprel
            token._.ud_misc = ud_token.misc

        return doc
