"""Custom exception hierarchy for bytebpe errors."""

from typing import TYPE_CHECKING

from .types import Token

if TYPE_CHECKING:
    from .trainer import BPETrainingResult


class ByteBPEError(Exception):
    """Base exception for all bytebpe errors."""


class TrainingError(ByteBPEError):
    """Raised when tokenizer training fails."""

    def __init__(self, message: str, *, vocab_size: int | None = None) -> None:
        extra = " "
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        super().__init__(message + extra)
        self.vocab_size = vocab_size


class InsufficientDataError(TrainingError):
    """
    Raised when the corpus ran out of pairs before the target vocab size.

    The partially trained result stays available on ``result``.
    """

    def __init__(self, message: str, *, result: "BPETrainingResult") -> None:
        super().__init__(
            f"{message} (merges: {result.n_merges_completed}/{result.n_merges_requested})",
            vocab_size=len(result.tokenizer),
        )
        self.result = result
        self.n_merges_requested = result.n_merges_requested
        self.n_merges_completed = result.n_merges_completed


class OutOfRangeError(ByteBPEError):
    """Raised when a token id has no vocabulary entry."""

    def __init__(
        self,
        message: str,
        *,
        invalid_tok: Token | None = None,
        vocab_size: int | None = None,
        position: int | None = None,
    ) -> None:
        """Initialize with optional token, vocab size and position that get appended to the message."""
        extra = " "
        if invalid_tok is not None:
            extra += f"(invalid token: {invalid_tok}) "
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        # decoding: index of the offending token in the input
        if position is not None:
            extra += f"(position: {position}) "
        super().__init__(message + extra)
        self.invalid_tok = invalid_tok
        self.vocab_size = vocab_size
        self.position = position


class MalformedStateError(ByteBPEError):
    """Raised when persisted merge rules cannot rebuild a consistent tokenizer."""

    def __init__(
        self,
        message: str,
        *,
        model_path: str | None = None,
        line_no: int | None = None,
    ) -> None:
        extra = " "
        if model_path:
            extra += f"(path: {model_path}) "
        if line_no is not None:
            extra += f"(line: {line_no}) "
        super().__init__(message + extra)
        self.model_path = model_path
        self.line_no = line_no


class ModeError(ByteBPEError):
    """Raised when a named mode does not exist."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available_modes: list[str] | None = None,
    ) -> None:
        extra = " "
        if invalid_name:
            extra += f"(available: {available_modes}) (got {invalid_name}) "
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available_modes = available_modes
