"""Standalone BPE training module."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
import logging

from ._bpe import N_BYTE_TOKENS, bpe_freqs, bpe_merge, most_frequent_pair, to_tokens
from ._decorators import measure_time
from ._progress import report_merge_progress
from .errors import InsufficientDataError
from .merges import MergeRuleSet
from .tokenizer import Tokenizer
from .types import TextInput, Token, TokenPair
from .vocab import VocabularyStore

log = logging.getLogger(__name__)


class TrainerState(str, Enum):
    """Lifecycle of one training run."""

    INIT = "init"
    ITERATING = "iterating"
    DONE = "done"


@dataclass(frozen=True)
class MergeProgress:
    """Snapshot emitted after each learned merge."""

    rank: int
    n_merges: int
    pair: TokenPair
    new_tok: Token
    freq: int


type MergeObserver = Callable[[MergeProgress], None]


@dataclass
class BPETrainingResult:
    """Results from one BPE training run."""

    tokenizer: Tokenizer
    n_merges_requested: int
    n_merges_completed: int

    @property
    def insufficient_data(self) -> bool:
        """True when the corpus ran out of pairs before all merges were learned."""
        return self.n_merges_completed < self.n_merges_requested

    def raise_for_insufficient_data(self) -> None:
        """
        Raise if training stopped early.

        :raises InsufficientDataError: Carrying this partial result.
        """
        if self.insufficient_data:
            raise InsufficientDataError("no more byte pairs to merge", result=self)


class BPETrainer:
    """
    BPE trainer that learns merge rules from raw bytes.

    Each iteration counts adjacent pairs over the whole sequence, merges the
    most frequent one (ties go to the pair seen first) and records the rule.
    Training the same data twice always yields the same rules.

    Example:
       >>> trainer = BPETrainer()
       >>> result = trainer.train(b"ababab", vocab_size=257)
       >>> result.tokenizer.merges
       {(97, 98): 256}
    """

    def __init__(self, observer: MergeObserver | None = None) -> None:
        self.observer = observer
        self.state = TrainerState.INIT

    @measure_time
    def train(
        self, text: TextInput, vocab_size: int, verbose: bool = False
    ) -> BPETrainingResult:
        """
        Train BPE on text or raw bytes.

        Learns ``vocab_size - 256`` merges on top of the base byte vocabulary.
        A ``vocab_size`` of 256 or less learns nothing and returns a base-only
        tokenizer. If the sequence collapses before the target is reached the
        partial result is returned and ``insufficient_data`` is set.

        :param text: Training text, raw bytes or a list of strings.
        :param vocab_size: Target vocabulary size including the base 256 bytes.
        :param verbose: Log each learned merge when ``True``.
        :returns: Training results containing the tokenizer and merge counts.
        """
        self.state = TrainerState.INIT
        tokens = to_tokens(text)
        # merges beyond base byte vocabulary
        n_merges = max(0, vocab_size - N_BYTE_TOKENS)
        if n_merges == 0:
            log.debug(f"vocab size {vocab_size} requests no merges")

        rules = MergeRuleSet()
        vocab = VocabularyStore()

        log.debug(f"training on {len(tokens)} bytes for {n_merges} merges")

        self.state = TrainerState.ITERATING
        for i in range(n_merges):
            freqs = bpe_freqs(tokens)
            # sequence collapsed to a single token or was too short to begin with
            if not freqs:
                log.warning(
                    f"no more byte pairs to merge after {i} merges "
                    f"(requested {n_merges}) stopping early"
                )
                break

            pair, freq = most_frequent_pair(freqs)
            rule = rules.add(pair)
            tokens = bpe_merge(tokens, pair, rule.new_tok)
            vocab.append(*pair)

            if verbose:
                log.info(
                    f"merge {i + 1}/{n_merges}: {pair} -> {rule.new_tok} had {freq} occurrences"
                )
            else:
                report_merge_progress(i + 1, n_merges)

            if self.observer is not None:
                self.observer(
                    MergeProgress(
                        rank=rule.rank,
                        n_merges=n_merges,
                        pair=pair,
                        new_tok=rule.new_tok,
                        freq=freq,
                    )
                )

        self.state = TrainerState.DONE
        return BPETrainingResult(
            tokenizer=Tokenizer(rules, vocab),
            n_merges_requested=n_merges,
            n_merges_completed=len(rules),
        )


def train_bpe(
    text: TextInput,
    vocab_size: int,
    verbose: bool = False,
    observer: MergeObserver | None = None,
) -> BPETrainingResult:
    """Train a tokenizer with a fresh ``BPETrainer``."""
    return BPETrainer(observer).train(text, vocab_size, verbose=verbose)


__all__ = [
    "BPETrainer",
    "BPETrainingResult",
    "MergeObserver",
    "MergeProgress",
    "TrainerState",
    "train_bpe",
]
