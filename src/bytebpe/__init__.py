"""ByteBPE: byte-level byte pair encoding."""

from ._progress import disable_progress, enable_progress
from .decoder import DecodeErrors, decode, list_decode_modes
from .encoder import encode
from .errors import (
    ByteBPEError,
    InsufficientDataError,
    MalformedStateError,
    ModeError,
    OutOfRangeError,
    TrainingError,
)
from .factory import from_merges, from_pretrained, train
from .merges import MergeRule, MergeRuleSet
from .parallel import ParallelMode, list_parallel_modes
from .tokenizer import Tokenizer
from .trainer import BPETrainer, BPETrainingResult, MergeProgress, TrainerState
from .vocab import VocabularyStore

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("bytebpe")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Tokenizer",
    "MergeRule",
    "MergeRuleSet",
    "VocabularyStore",
    "BPETrainer",
    "BPETrainingResult",
    "MergeProgress",
    "TrainerState",
    "DecodeErrors",
    "ParallelMode",
    "ByteBPEError",
    "TrainingError",
    "InsufficientDataError",
    "OutOfRangeError",
    "MalformedStateError",
    "ModeError",
    "train",
    "encode",
    "decode",
    "from_merges",
    "from_pretrained",
    "list_decode_modes",
    "list_parallel_modes",
    "enable_progress",
    "disable_progress",
]
