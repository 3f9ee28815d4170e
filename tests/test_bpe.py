"""Unit tests for pair counting, pair selection and merging."""

import pytest

from bytebpe._bpe import bpe_freqs, bpe_merge, most_frequent_pair, to_tokens


# Pair counting
# ---------------------------------------------------------------------------


def test_bpe_freqs_counts_adjacent_pairs():
    """Every adjacent pair is counted, overlapping occurrences included."""
    assert bpe_freqs([1, 1, 1, 2]) == {(1, 1): 2, (1, 2): 1}


def test_bpe_freqs_keeps_first_occurrence_order():
    """Pairs appear in the order they are first seen."""
    freqs = bpe_freqs([5, 6, 1, 2, 5, 6, 1, 2])
    assert list(freqs) == [(5, 6), (6, 1), (1, 2), (2, 5)]


@pytest.mark.parametrize("tokens", [[], [42]])
def test_bpe_freqs_short_sequence_is_empty(tokens):
    """Fewer than two tokens yields no pairs."""
    assert bpe_freqs(tokens) == {}


# Pair selection
# ---------------------------------------------------------------------------


def test_most_frequent_pair_picks_max():
    """The highest count wins."""
    assert most_frequent_pair({(1, 2): 1, (3, 4): 5, (5, 6): 2}) == ((3, 4), 5)


def test_most_frequent_pair_tie_goes_to_first_seen():
    """Ties resolve to the pair encountered first."""
    freqs = bpe_freqs([7, 8, 9, 7, 8, 9])
    # (7, 8) and (8, 9) both occur twice
    assert most_frequent_pair(freqs) == ((7, 8), 2)


def test_most_frequent_pair_empty_raises():
    """Selecting from nothing is a caller bug."""
    with pytest.raises(ValueError):
        most_frequent_pair({})


# Merging
# ---------------------------------------------------------------------------


def test_bpe_merge_replaces_all_occurrences():
    """All matching pairs are replaced, the rest is copied."""
    assert bpe_merge([1, 2, 3, 1, 2], (1, 2), 256) == [256, 3, 256]


def test_bpe_merge_is_greedy_left_to_right():
    """Overlapping matches are consumed from the left."""
    assert bpe_merge([97, 97, 97], (97, 97), 256) == [256, 97]
    assert bpe_merge([97, 97, 97, 97], (97, 97), 256) == [256, 256]


def test_bpe_merge_keeps_trailing_token():
    """The last token survives when it does not start a match."""
    assert bpe_merge([1, 2, 9], (1, 2), 300) == [300, 9]


def test_bpe_merge_no_match_copies_input():
    """Sequences without the pair come back unchanged."""
    tokens = [4, 5, 6]
    assert bpe_merge(tokens, (6, 4), 256) == tokens


def test_bpe_merge_never_grows_or_creates_spurious_matches():
    """Output is never longer, and merged tokens never re-form the pair."""
    tokens = [1, 1, 2, 1, 1, 1, 2, 2, 1]
    merged = bpe_merge(tokens, (1, 1), 256)
    assert len(merged) <= len(tokens)
    assert merged == [256, 2, 256, 1, 2, 2, 1]
    assert (1, 1) not in bpe_freqs(merged)


# Input conversion
# ---------------------------------------------------------------------------


def test_to_tokens_accepts_text_and_bytes():
    """Strings are UTF-8 encoded; bytes map straight to ids."""
    assert to_tokens("hé") == [104, 195, 169]
    assert to_tokens(b"\x00\xff") == [0, 255]
    assert to_tokens(bytearray(b"ab")) == [97, 98]
    assert to_tokens(["ab", "c"]) == [97, 98, 99]


def test_to_tokens_rejects_other_types():
    """Non-text input is a type error."""
    with pytest.raises(TypeError):
        to_tokens(123)
