"""
Trained byte-level BPE tokenizer: merge rules plus the vocabulary built from them.
"""

from collections.abc import Iterable
from pathlib import Path
from typing import Final
import logging

from ._bpe import N_BYTE_TOKENS, to_tokens
from ._sanitise import vocab_line
from .decoder import DecodeErrors, DecodeStrategy, decode_tokens
from .encoder import apply_merges
from .errors import MalformedStateError
from .merges import MergeRule, MergeRuleSet
from .parallel import ParallelMode, ParallelStrategy, map_texts
from .types import Encoding, TextInput, Token, TokenPair, Vocabulary
from .vocab import VocabularyStore

PREFIX: Final[str] = "ByteBPE"
FORMAT_VERSION: Final[str] = "1"
MODEL_SUFFIX: Final[str] = ".model"
VOCAB_SUFFIX: Final[str] = ".vocab"
SECTION_MARKER: Final[str] = "---"

log = logging.getLogger(__name__)


class Tokenizer:
    """
    Byte-level BPE tokenizer.

    Owns one ``MergeRuleSet`` and the ``VocabularyStore`` built from the same
    training run. Both are treated as read-only once the tokenizer exists.
    An untrained tokenizer (no rules) maps every byte to its own token.
    """

    def __init__(
        self,
        rules: MergeRuleSet | None = None,
        vocab: VocabularyStore | None = None,
    ) -> None:
        """
        Initialize from merge rules and, optionally, a matching vocabulary.

        Both are copied, so later changes to the arguments never reach the
        tokenizer.

        :raises MalformedStateError: If ``vocab`` was not built from ``rules``.
        """
        self._rules: MergeRuleSet = rules.copy() if rules is not None else MergeRuleSet()
        if vocab is None:
            vocab = VocabularyStore.from_rules(self._rules)
        elif len(vocab) != N_BYTE_TOKENS + len(self._rules):
            raise MalformedStateError(
                f"vocabulary size {len(vocab)} does not match "
                f"{len(self._rules)} merge rules"
            )
        else:
            vocab = vocab.copy()
        self._vocab: VocabularyStore = vocab

    @classmethod
    def from_merges(cls, merges: Iterable[tuple[TokenPair, Token]]) -> "Tokenizer":
        """
        Rebuild a tokenizer from ``(pair, new_tok)`` entries in rank order.

        :raises MalformedStateError: If the entries do not form a valid rule list.
        """
        return cls(MergeRuleSet.from_merges(merges))

    @property
    def rules(self) -> tuple[MergeRule, ...]:
        """Merge rules in rank order (read-only)."""
        return tuple(self._rules)

    @property
    def merges(self) -> Encoding:
        """Byte pair -> merge token, in rank order."""
        return self._rules.as_encoding()

    @property
    def vocab(self) -> Vocabulary:
        """Token -> bytes."""
        return self._vocab.as_dict()

    def vocab_size(self) -> int:
        """Return the number of tokens in the vocabulary."""
        return len(self._vocab)

    def __len__(self) -> int:
        return len(self._vocab)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(vocab_size={len(self)}, n_merges={len(self._rules)})"

    def encode(self, text: TextInput) -> list[Token]:
        """
        Encode text into tokens using byte-level BPE.

        :param text: Text or raw bytes to encode.
        :returns: Token ids matching what training produced for the same bytes.
        """
        return apply_merges(to_tokens(text), self._rules)

    def encode_batch(
        self,
        texts: list[TextInput],
        num_workers: int | None = None,
        parallel_mode: "ParallelStrategy | ParallelMode" = "auto",
    ) -> list[list[Token]]:
        """
        Encode multiple texts with optional batch-level parallel processing.

        :param texts: Text inputs to encode.
        :param num_workers: Worker count for batch-level parallel mode.
        :param parallel_mode: ``"auto"``, ``"batch"`` or ``"off"``.
        :returns: Encoded token sequences in input order.
        :raises ModeError: If ``parallel_mode`` is unknown.
        """
        if not texts:
            return []
        return map_texts(self.encode, texts, num_workers, parallel_mode)

    def decode(
        self,
        tokens: list[Token],
        errors: "DecodeStrategy | DecodeErrors" = "strict",
    ) -> bytes:
        """
        Decode a sequence of tokens back into bytes.

        :param errors: ``"strict"`` (default) or ``"skip"`` for unknown ids.
        :raises OutOfRangeError: If a token is not in the vocabulary in strict mode.
        """
        return decode_tokens(self._vocab, tokens, errors)

    def decode_text(
        self,
        tokens: list[Token],
        errors: "DecodeStrategy | DecodeErrors" = "strict",
        encoding_errors: str = "replace",
    ) -> str:
        """Decode tokens and then the resulting bytes as UTF-8."""
        return self.decode(tokens, errors).decode("utf-8", errors=encoding_errors)

    def save(self, file_prefix: str | Path) -> None:
        """
        Save tokenizer state to disk.

        Creates two files: a .model file with the merge rules in rank order and
        a .vocab file with human-readable token representations. The rules
        alone are enough to rebuild the tokenizer.

        :param file_prefix: Path prefix for output files.
        """
        log.info(f"saving tokenizer to {file_prefix}")
        self._save_model(file_prefix)
        self._save_vocab(file_prefix)
        log.info("tokenizer saved successfully")

    @classmethod
    def load(cls, model_filename: str | Path) -> "Tokenizer":
        """
        Load a tokenizer from a .model file.

        :param model_filename: Path to the .model file.
        :raises MalformedStateError: If the file is missing, has the wrong
            extension or format version, or its rules are inconsistent.
        """
        path = Path(model_filename)

        if not path.exists():
            raise MalformedStateError("model filepath does not exist", model_path=str(path))

        if path.suffix != MODEL_SUFFIX:
            raise MalformedStateError("expected .model file", model_path=str(path))

        log.info(f"loading model from {path}")

        def fail(message: str, line_no: int | None = None) -> MalformedStateError:
            return MalformedStateError(message, model_path=str(path), line_no=line_no)

        try:
            with path.open("r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        # binary content or a directory named like a model file
        except (UnicodeDecodeError, OSError) as e:
            raise fail(f"unreadable model file: {e}") from e

        if len(lines) < 4:
            raise fail("truncated model file")

        # header: prefix and format version
        header = lines[0].split()
        if len(header) != 2 or header[0] != PREFIX:
            raise fail(f"unrecognised header: {lines[0]!r}", 1)
        if header[1] != FORMAT_VERSION:
            raise fail(f"unsupported format version: (expected {FORMAT_VERSION}) (got {header[1]})", 1)

        if lines[1].strip() != SECTION_MARKER:
            raise fail(f"start sequence marker missing: (got {lines[1].strip()})", 2)

        try:
            n_merges = int(lines[2])
            if n_merges < 0:
                raise ValueError()
        except ValueError:
            raise fail(f"invalid merge count: {lines[2].strip()}", 3)

        if lines[3].strip() != SECTION_MARKER:
            raise fail(f"end sequence marker missing: (got {lines[3].strip()})", 4)

        merges: list[tuple[TokenPair, Token]] = []
        for line_no, line in enumerate(lines[4:], start=5):
            if not line.strip():
                continue
            try:
                # tokens are stored as strings in file
                ctok0, ctok1, mtok = map(int, line.split())
            except ValueError:
                raise fail(f"invalid merge format: {line.strip()}", line_no)
            merges.append(((ctok0, ctok1), mtok))

        if len(merges) != n_merges:
            raise fail(f"merge count mismatch: (expected {n_merges}) (got {len(merges)})")

        try:
            tokenizer = cls.from_merges(merges)
        except MalformedStateError as e:
            raise fail(str(e).strip()) from e

        log.info(
            f"model loaded successfully: {len(tokenizer.rules)} merge rules, "
            f"{len(tokenizer)} total tokens"
        )
        return tokenizer

    def _save_model(self, file_prefix: str | Path) -> None:
        """Persist merge rules to a .model file."""
        model_path = Path(file_prefix).with_suffix(MODEL_SUFFIX)
        # create directory if does not exist
        model_path.parent.mkdir(parents=True, exist_ok=True)

        log.debug(f"saving {len(self._rules)} merge rules to {model_path}")

        with model_path.open("w", encoding="utf-8", newline="\n") as f:
            f.write(f"{PREFIX} {FORMAT_VERSION}\n")
            f.write(f"{SECTION_MARKER}\n")
            f.write(f"{len(self._rules)}\n")
            f.write(f"{SECTION_MARKER}\n")
            # rank order: children always precede their parent
            for rule in self._rules:
                f.write(f"{rule.first} {rule.second} {rule.new_tok}\n")

    def _save_vocab(self, file_prefix: str | Path) -> None:
        """Persist human-readable token representations to a .vocab file."""
        vocab_path = Path(file_prefix).with_suffix(VOCAB_SUFFIX)
        vocab_path.parent.mkdir(parents=True, exist_ok=True)

        log.debug(f"saving vocab to {vocab_path}")

        lookup = self._vocab.lookup
        with vocab_path.open("w", encoding="utf-8", newline="\n") as f:
            for tok, b in self._vocab:
                if tok < N_BYTE_TOKENS:
                    f.write(vocab_line(tok, b) + "\n")
                else:
                    rule = self._rules[tok - N_BYTE_TOKENS]
                    f.write(vocab_line(tok, b, (lookup(rule.first), lookup(rule.second))) + "\n")
