"""Turn token ids back into bytes."""

from enum import Enum
from typing import Literal, TYPE_CHECKING
import logging

from .errors import ModeError, OutOfRangeError
from .types import Token
from .vocab import VocabularyStore

if TYPE_CHECKING:
    from .tokenizer import Tokenizer

DecodeStrategy = Literal["strict", "skip"]

log = logging.getLogger(__name__)


class DecodeErrors(str, Enum):
    """What to do with token ids that have no vocabulary entry."""

    # raise on the first unknown id
    STRICT = "strict"
    # drop unknown ids and keep going
    SKIP = "skip"

    @classmethod
    def get(cls, name: "str | DecodeErrors") -> "DecodeErrors":
        """Get decode policy by name (case-insensitive)."""
        if isinstance(name, DecodeErrors):
            return name
        try:
            return cls[name.upper()]
        except KeyError:
            raise ModeError(
                "unknown decode mode",
                invalid_name=name,
                available_modes=list_decode_modes(),
            )


def list_decode_modes() -> list[str]:
    """Return available decode error policy names."""
    return [mode.value for mode in DecodeErrors]


def decode_tokens(
    vocab: VocabularyStore,
    tokens: list[Token],
    errors: "DecodeStrategy | DecodeErrors" = "strict",
) -> bytes:
    """
    Concatenate the vocabulary bytes of every token in order.

    :param vocab: Vocabulary used to look tokens up.
    :param tokens: Token sequence to decode.
    :param errors: ``"strict"`` raises on unknown ids, ``"skip"`` drops them.
    :raises OutOfRangeError: In strict mode, for the first unknown id.
    """
    policy = DecodeErrors.get(errors)
    chunks: list[bytes] = []

    for pos, tok in enumerate(tokens):
        try:
            chunks.append(vocab.lookup(tok))
        except OutOfRangeError as e:
            if policy is DecodeErrors.STRICT:
                raise OutOfRangeError(
                    "failed to decode", invalid_tok=tok, vocab_size=len(vocab), position=pos
                ) from e
            log.warning(f"skipping unknown token {tok} at position {pos}")

    return b"".join(chunks)


def decode(
    tokenizer: "Tokenizer",
    tokens: list[Token],
    errors: "DecodeStrategy | DecodeErrors" = "strict",
) -> bytes:
    """Decode ``tokens`` into bytes with ``tokenizer``."""
    return tokenizer.decode(tokens, errors=errors)
