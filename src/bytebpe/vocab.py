"""Dense token id -> bytes vocabulary."""

from collections.abc import Iterator
from typing import TYPE_CHECKING
import logging

from ._bpe import N_BYTE_TOKENS
from .errors import OutOfRangeError
from .types import Token, TokenBytes, Vocabulary

if TYPE_CHECKING:
    from .merges import MergeRuleSet

log = logging.getLogger(__name__)


class VocabularyStore:
    """
    Maps token ids to the byte strings they stand for.

    Seeded with the 256 single-byte tokens. Merged tokens are appended one at a
    time and existing entries never change, so ids stay dense: every id in
    ``range(len(store))`` has exactly one entry.
    """

    def __init__(self) -> None:
        # index == token id
        self._entries: list[TokenBytes] = [bytes([btok]) for btok in range(N_BYTE_TOKENS)]

    @classmethod
    def from_rules(cls, rules: "MergeRuleSet") -> "VocabularyStore":
        """Rebuild a vocabulary by replaying merge rules in rank order."""
        vocab = cls()
        for rule in rules:
            vocab.append(*rule.pair)
        log.debug(f"built vocabulary with {len(vocab)} tokens")
        return vocab

    def append(self, first: Token, second: Token) -> Token:
        """
        Add the token formed by concatenating ``first`` and ``second``.

        :returns: The new token id, equal to the store size before the call.
        :raises OutOfRangeError: If either child token is not in the vocabulary.
        """
        new_tok = len(self._entries)
        self._entries.append(self.lookup(first) + self.lookup(second))
        return new_tok

    def lookup(self, tok: Token) -> TokenBytes:
        """
        Return the bytes for ``tok``.

        :raises OutOfRangeError: If ``tok`` is not an int, is negative or is
            not yet defined.
        """
        # bool is an int subclass but never a token id
        if not isinstance(tok, int) or isinstance(tok, bool) or not 0 <= tok < len(self._entries):
            raise OutOfRangeError(
                "token not in vocabulary",
                invalid_tok=tok,
                vocab_size=len(self._entries),
            )
        return self._entries[tok]

    def copy(self) -> "VocabularyStore":
        """Return an independent store holding the same entries."""
        vocab = VocabularyStore()
        vocab._entries = list(self._entries)
        return vocab

    def as_dict(self) -> Vocabulary:
        """Return a copy of the vocabulary as a plain dict."""
        return dict(enumerate(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, tok: object) -> bool:
        return isinstance(tok, int) and not isinstance(tok, bool) and 0 <= tok < len(self._entries)

    def __iter__(self) -> Iterator[tuple[Token, TokenBytes]]:
        return iter(enumerate(self._entries))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={len(self)})"
