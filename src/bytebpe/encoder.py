"""Apply learned merge rules to new text."""

from typing import TYPE_CHECKING

from ._bpe import bpe_merge
from .merges import MergeRule, MergeRuleSet
from .types import TextInput, Token

if TYPE_CHECKING:
    from .tokenizer import Tokenizer


def apply_merges(tokens: list[Token], rules: MergeRuleSet) -> list[Token]:
    """
    Apply BPE merges to a token sequence.

    Each round merges the adjacent pair whose rule has the lowest rank, since
    later rules were learned on a sequence where earlier merges had already
    happened. Stops once no adjacent pair has a rule.

    :param tokens: List of tokens (initially bytes 0-255).
    :param rules: Merge rules to apply.
    :returns: Compressed token sequence after applying learned merges.
    """
    # loop text compression using BPE algorithm.
    while len(tokens) >= 2:
        # we dont need to count frequencies to find the min rank pair.
        best: MergeRule | None = None
        for pair in set(zip(tokens, tokens[1:])):
            rule = rules.get(pair)
            if rule is not None and (best is None or rule.rank < best.rank):
                best = rule
        # no pair to merge.
        if best is None:
            break
        tokens = bpe_merge(tokens, best.pair, best.new_tok)

    return tokens


def encode(tokenizer: "Tokenizer", text: TextInput) -> list[Token]:
    """Encode ``text`` into token ids with ``tokenizer``."""
    return tokenizer.encode(text)
