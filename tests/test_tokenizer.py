"""Unit tests for bytebpe tokenizer encode/decode, edge cases, and serialization."""

import logging

import pytest

import bytebpe as bpe
from bytebpe.errors import MalformedStateError, ModeError, OutOfRangeError


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tokenizer():
    """Return a tokenizer trained on a small repetitive corpus."""
    return bpe.train("hello world hello world", vocab_size=270).tokenizer


@pytest.fixture
def aaaa_tokenizer():
    """Return the one-rule tokenizer learned from "aaaa"."""
    return bpe.train("aaaa", vocab_size=257).tokenizer


def write_model(path, body: str):
    """Write a raw .model file and return its path."""
    path.write_text(body, encoding="utf-8")
    return path


# Encode-decode round-trip
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "text",
    [
        "Hello, world!",
        "hello world",
        "café naïve 日本語 🎉",
        "   \n\t  ",
        "x",
        "",
    ],
)
def test_encode_decode_roundtrip(tokenizer, text):
    """Decoding encoded text returns the original bytes."""
    tokens = tokenizer.encode(text)
    assert tokenizer.decode(tokens) == text.encode("utf-8")
    assert tokenizer.decode_text(tokens) == text


def test_roundtrip_every_byte_value(tokenizer):
    """Arbitrary bytes, including invalid UTF-8, survive the round trip."""
    data = bytes(range(256)) + b"hello world" + bytes(range(255, -1, -1))
    assert tokenizer.decode(tokenizer.encode(data)) == data


def test_repetitive_text_creates_merges(tokenizer):
    """Text seen in training compresses below one token per byte."""
    text = "hello world"
    assert len(tokenizer.encode(text)) < len(text.encode("utf-8"))


def test_free_functions_match_methods(tokenizer):
    """Module-level encode/decode delegate to the tokenizer."""
    ids = bpe.encode(tokenizer, "hello")
    assert ids == tokenizer.encode("hello")
    assert bpe.decode(tokenizer, ids) == b"hello"


# Rank priority
# ---------------------------------------------------------------------------


def test_lower_rank_rule_applies_first():
    """When two rules match, the earlier-learned one wins."""
    # rank 0: (b, c), rank 1: (a, b)
    tok = bpe.from_merges([((98, 99), 256), ((97, 98), 257)])
    assert tok.encode("abc") == [97, 256]


def test_untrained_tokenizer_maps_bytes():
    """Without rules every byte is its own token."""
    tok = bpe.Tokenizer()
    assert tok.encode("abc") == [97, 98, 99]
    assert tok.decode([97, 98, 99]) == b"abc"
    assert tok.vocab_size() == 256


# Decoding errors
# ---------------------------------------------------------------------------


def test_decode_strict_raises_with_position(aaaa_tokenizer):
    """Unknown ids raise in strict mode, naming the id and its position."""
    with pytest.raises(OutOfRangeError) as exc_info:
        aaaa_tokenizer.decode([97, 999])
    assert exc_info.value.invalid_tok == 999
    assert exc_info.value.position == 1
    assert exc_info.value.vocab_size == 257


def test_decode_negative_id_raises(aaaa_tokenizer):
    """Negative ids are never looked up."""
    with pytest.raises(OutOfRangeError):
        aaaa_tokenizer.decode([-1])


def test_decode_skip_drops_unknown_ids(aaaa_tokenizer, caplog):
    """Skip mode drops unknown ids, logs them and keeps going."""
    caplog.set_level(logging.WARNING, logger="bytebpe")
    assert aaaa_tokenizer.decode([256, 500, 98], errors="skip") == b"aab"
    assert "skipping unknown token 500 at position 1" in caplog.text


def test_decode_unknown_mode_raises(aaaa_tokenizer):
    """Unknown decode modes are rejected."""
    with pytest.raises(ModeError):
        aaaa_tokenizer.decode([97], errors="ignore")


def test_list_decode_modes():
    """Both decode policies are listed."""
    assert bpe.list_decode_modes() == ["strict", "skip"]


# Batch encode
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("mode", ["auto", "batch", "off", bpe.ParallelMode.BATCH])
def test_encode_batch_matches_single(tokenizer, mode):
    """Batch encoding returns single-text results in input order."""
    texts = ["First.", "hello world", b"raw bytes", "Third."]
    encoded = tokenizer.encode_batch(texts, num_workers=2, parallel_mode=mode)
    assert encoded == [tokenizer.encode(text) for text in texts]


def test_encode_batch_empty(tokenizer):
    """No texts, no work."""
    assert tokenizer.encode_batch([]) == []


def test_encode_batch_unknown_mode(tokenizer):
    """Unknown parallel modes are rejected."""
    with pytest.raises(ModeError):
        tokenizer.encode_batch(["a", "b"], parallel_mode="chunk")


# Construction
# ---------------------------------------------------------------------------


def test_mismatched_rules_and_vocab_rejected():
    """Rules and vocabulary must come from the same run."""
    rules = bpe.MergeRuleSet.from_merges([((97, 97), 256)])
    with pytest.raises(MalformedStateError):
        bpe.Tokenizer(rules, bpe.VocabularyStore())


def test_rules_cannot_be_changed_after_training(aaaa_tokenizer):
    """The public rules view is read-only, so encode and decode stay in sync."""
    assert isinstance(aaaa_tokenizer.rules, tuple)
    with pytest.raises(AttributeError):
        aaaa_tokenizer.rules.add((98, 98))
    assert aaaa_tokenizer.encode("bb") == [98, 98]
    assert aaaa_tokenizer.decode(aaaa_tokenizer.encode("aabb")) == b"aabb"


def test_constructor_arguments_are_copied():
    """Growing the rule set or vocabulary after construction does not leak in."""
    rules = bpe.MergeRuleSet.from_merges([((97, 97), 256)])
    vocab = bpe.VocabularyStore.from_rules(rules)
    tok = bpe.Tokenizer(rules, vocab)

    rules.add((98, 98))
    vocab.append(98, 98)

    assert tok.merges == {(97, 97): 256}
    assert len(tok) == 257
    assert tok.encode("bb") == [98, 98]


# Save and load round-trip
# ---------------------------------------------------------------------------


def test_save_load_roundtrip(tokenizer, tmp_path):
    """Save and load preserves tokenizer state."""
    prefix = tmp_path / "models" / "tok"
    tokenizer.save(prefix)

    loaded = bpe.from_pretrained(f"{prefix}.model")
    assert loaded.merges == tokenizer.merges
    assert loaded.vocab == tokenizer.vocab
    assert loaded.encode("hello world") == tokenizer.encode("hello world")
    assert loaded.decode(loaded.encode("test string")) == b"test string"


def test_save_writes_model_and_vocab(aaaa_tokenizer, tmp_path):
    """The .model file lists rules; the .vocab file is human readable."""
    prefix = tmp_path / "aaaa"
    aaaa_tokenizer.save(prefix)

    model = (tmp_path / "aaaa.model").read_text(encoding="utf-8").splitlines()
    assert model == ["ByteBPE 1", "---", "1", "---", "97 97 256"]

    vocab = (tmp_path / "aaaa.vocab").read_text(encoding="utf-8").splitlines()
    assert len(vocab) == 257
    assert vocab[97] == "[97] a"
    assert vocab[10] == "[10] \\u000a"
    assert vocab[256] == "[256] [a][a] -> aa"


def test_load_untrained_roundtrip(tmp_path):
    """A base-only tokenizer saves and loads with zero rules."""
    prefix = tmp_path / "base"
    bpe.Tokenizer().save(prefix)
    loaded = bpe.Tokenizer.load(tmp_path / "base.model")
    assert len(loaded) == 256
    assert loaded.merges == {}


def test_load_missing_file(tmp_path):
    """Missing model files are reported with their path."""
    with pytest.raises(MalformedStateError) as exc_info:
        bpe.from_pretrained(tmp_path / "nope.model")
    assert exc_info.value.model_path is not None


def test_load_wrong_suffix(tmp_path):
    """Only .model files are accepted."""
    path = write_model(tmp_path / "tok.txt", "ByteBPE 1\n---\n0\n---\n")
    with pytest.raises(MalformedStateError):
        bpe.from_pretrained(path)


@pytest.mark.parametrize(
    "body",
    [
        # wrong header
        "ByteTok 1\n---\n0\n---\n",
        # unsupported format version
        "ByteBPE 99\n---\n0\n---\n",
        # missing start marker
        "ByteBPE 1\n0\n---\n97 97 256\n",
        # bad count
        "ByteBPE 1\n---\nmany\n---\n",
        # count mismatch
        "ByteBPE 1\n---\n2\n---\n97 97 256\n",
        # non-integer rule
        "ByteBPE 1\n---\n1\n---\n97 x 256\n",
        # non-dense ids
        "ByteBPE 1\n---\n1\n---\n97 97 300\n",
        # forward reference
        "ByteBPE 1\n---\n2\n---\n97 257 256\n98 98 257\n",
        # truncated
        "ByteBPE 1\n",
    ],
)
def test_load_rejects_malformed_model(tmp_path, body):
    """Malformed model files are rejected at load time."""
    path = write_model(tmp_path / "bad.model", body)
    with pytest.raises(MalformedStateError) as exc_info:
        bpe.Tokenizer.load(path)
    assert exc_info.value.model_path == str(path)


def test_load_rejects_non_utf8_model(tmp_path):
    """Binary model content is reported as malformed, not as a decode error."""
    path = tmp_path / "binary.model"
    path.write_bytes(b"ByteBPE 1\n---\n1\n---\n97 97 256\xff\xfe\n")
    with pytest.raises(MalformedStateError) as exc_info:
        bpe.from_pretrained(path)
    assert exc_info.value.model_path == str(path)


def test_load_rejects_directory(tmp_path):
    """A directory named like a model file is unreadable, not a crash."""
    path = tmp_path / "dir.model"
    path.mkdir()
    with pytest.raises(MalformedStateError):
        bpe.Tokenizer.load(path)
