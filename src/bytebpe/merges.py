"""
Ordered merge rules learned during training.

A rule's rank is its position in training order, and the token it produces is
always ``256 + rank``. Lower ranks take priority when encoding.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from ._bpe import N_BYTE_TOKENS
from .errors import MalformedStateError
from .types import Encoding, Token, TokenPair


@dataclass(frozen=True, slots=True)
class MergeRule:
    """One learned merge: ``pair`` collapses into ``new_tok``."""

    pair: TokenPair
    new_tok: Token
    rank: int

    @property
    def first(self) -> Token:
        return self.pair[0]

    @property
    def second(self) -> Token:
        return self.pair[1]


class MergeRuleSet:
    """Merge rules kept in rank order with constant time lookup by pair."""

    def __init__(self) -> None:
        self._rules: list[MergeRule] = []
        # byte pair -> rule
        self._by_pair: dict[TokenPair, MergeRule] = {}

    @classmethod
    def from_merges(cls, merges: Iterable[tuple[TokenPair, Token]]) -> "MergeRuleSet":
        """
        Build a rule set from ``(pair, new_tok)`` entries listed in rank order.

        :raises MalformedStateError: If ids are not dense, a pair references a
            token not defined at its position, or a pair is repeated.
        """
        rules = cls()
        for rank, (pair, new_tok) in enumerate(merges):
            expected = N_BYTE_TOKENS + rank
            if new_tok != expected:
                raise MalformedStateError(
                    f"merge token ids must be dense: (expected {expected}) (got {new_tok})"
                )
            rules.add(pair)
        return rules

    @property
    def next_token(self) -> Token:
        """Token id the next learned rule will produce."""
        return N_BYTE_TOKENS + len(self._rules)

    def add(self, pair: TokenPair) -> MergeRule:
        """
        Append a rule for ``pair`` with the next free rank and token id.

        :raises MalformedStateError: If either token of ``pair`` does not exist
            yet or ``pair`` already has a rule.
        """
        first, second = pair
        for tok in (first, second):
            if not 0 <= tok < self.next_token:
                raise MalformedStateError(
                    f"merge {pair} references undefined token {tok} "
                    f"(defined: 0..{self.next_token - 1})"
                )
        if pair in self._by_pair:
            raise MalformedStateError(f"duplicate merge for pair {pair}")

        rule = MergeRule(pair=(first, second), new_tok=self.next_token, rank=len(self._rules))
        self._rules.append(rule)
        self._by_pair[rule.pair] = rule
        return rule

    def get(self, pair: TokenPair) -> MergeRule | None:
        """Return the rule for ``pair`` or ``None`` when it was never learned."""
        return self._by_pair.get(pair)

    def copy(self) -> "MergeRuleSet":
        """Return an independent rule set holding the same rules."""
        rules = MergeRuleSet()
        rules._rules = list(self._rules)
        rules._by_pair = dict(self._by_pair)
        return rules

    def as_encoding(self) -> Encoding:
        """Return the rules as a ``pair -> token`` dict in rank order."""
        return {rule.pair: rule.new_tok for rule in self._rules}

    def __getitem__(self, rank: int) -> MergeRule:
        return self._rules[rank]

    def __contains__(self, pair: object) -> bool:
        return pair in self._by_pair

    def __iter__(self) -> Iterator[MergeRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MergeRuleSet):
            return NotImplemented
        return self._rules == other._rules

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(n_rules={len(self)})"
