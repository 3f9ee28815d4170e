"""Factory functions for creating tokenizers."""

from collections.abc import Iterable
from pathlib import Path

from .tokenizer import Tokenizer
from .trainer import BPETrainingResult, MergeObserver, train_bpe
from .types import TextInput, Token, TokenPair


def train(
    text: TextInput,
    vocab_size: int,
    verbose: bool = False,
    observer: MergeObserver | None = None,
) -> BPETrainingResult:
    """
    Train a new tokenizer.

    Check ``result.insufficient_data`` (or call
    ``result.raise_for_insufficient_data()``) to find out whether the corpus
    supported every requested merge.

    .. code-block:: python

        result = train("hello world hello world", vocab_size=300)
        tok = result.tokenizer
        tok.decode(tok.encode("hello"))  # b"hello"
    """
    return train_bpe(text, vocab_size, verbose=verbose, observer=observer)


def from_merges(merges: Iterable[tuple[TokenPair, Token]]) -> Tokenizer:
    """Rebuild a tokenizer from ``(pair, new_tok)`` entries in rank order."""
    return Tokenizer.from_merges(merges)


def from_pretrained(model_path: str | Path) -> Tokenizer:
    """
    Load a tokenizer previously written by ``Tokenizer.save``.

    :param model_path: Path to the .model file.
    :raises MalformedStateError: If the file does not exist, has the wrong
        extension, cannot be read or holds inconsistent rules.
    """
    return Tokenizer.load(model_path)
