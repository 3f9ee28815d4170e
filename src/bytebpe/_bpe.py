"""
Core Byte Pair Encoding (BPE) operations.
"""

from typing import Final

from .types import PairCounts, TextInput, Token, TokenPair

N_BYTE_TOKENS: Final[int] = 256


def to_tokens(text: TextInput) -> list[Token]:
    """
    Convert raw input into base byte tokens in the range [0, 255].

    Strings are encoded as UTF-8; a list of strings is joined first.

    :raises TypeError: If ``text`` is not bytes, a string or a list of strings.
    """
    # handle list input before converting text to bytes
    if isinstance(text, list):
        text = "".join(text)
    if isinstance(text, str):
        return list(text.encode("utf-8"))
    if isinstance(text, (bytes, bytearray)):
        return list(text)
    raise TypeError(f"expected str, bytes or list[str], got {type(text).__name__}")


def bpe_freqs(tokens: list[Token]) -> PairCounts:
    """
    Count every consecutive token pair in the token list.

    The returned mapping preserves first-occurrence order of the pairs, which
    is what training relies on to break frequency ties deterministically.

    :param tokens: List of tokens to analyze.
    :returns: Mapping of token pairs to their occurrence counts. Empty when
        fewer than two tokens are given.
    """
    pairs: PairCounts = {}

    for pair in zip(tokens, tokens[1:]):
        pairs[pair] = pairs.get(pair, 0) + 1

    return pairs


def most_frequent_pair(freqs: PairCounts) -> tuple[TokenPair, int]:
    """
    Return the pair with the highest count and that count.

    ``max`` keeps the first maximal element, so ties go to the pair that was
    seen first.

    :raises ValueError: If ``freqs`` is empty.
    """
    if not freqs:
        raise ValueError("no pairs to choose from")
    return max(freqs.items(), key=lambda item: item[1])


def bpe_merge(tokens: list[Token], target: TokenPair, new_tok: Token) -> list[Token]:
    """
    Merge all occurrences of a target token pair into a single new token.

    Matches are consumed greedily from the left and never overlap:
    ``[a, a, a]`` merged on ``(a, a)`` becomes ``[new, a]``.

    Note that some merged tokens may be partial UTF-8 sequences, so their
    bytes cannot always be decoded on their own.

    :param tokens: Original list of tokens.
    :param target: The consecutive pair of tokens to merge.
    :param new_tok: The new token that replaces the target pair.
    :returns: New token list with all target pairs replaced by ``new_tok``.
    """
    newtoks: list[Token] = []

    i = 0
    n = len(tokens)
    while i < n:
        # check if we can form a pair and it matches the target
        if i < n - 1 and tokens[i] == target[0] and tokens[i + 1] == target[1]:
            newtoks.append(new_tok)
            i += 2
        else:
            newtoks.append(tokens[i])
            i += 1

    return newtoks


__all__ = [
    "N_BYTE_TOKENS",
    "to_tokens",
    "bpe_freqs",
    "most_frequent_pair",
    "bpe_merge",
]
