"""Parallel processing mode helpers for batch encoding."""

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Literal
import logging
import os

from .errors import ModeError
from .types import TextInput, Token

ParallelStrategy = Literal["auto", "batch", "off"]

log = logging.getLogger(__name__)


class ParallelMode(str, Enum):
    """Named parallelization modes for batch encoding."""

    AUTO = "auto"
    BATCH = "batch"
    OFF = "off"

    @classmethod
    def get(cls, name: "str | ParallelMode") -> "ParallelMode":
        """Get parallel mode by name (case-insensitive)."""
        if isinstance(name, ParallelMode):
            return name
        try:
            return cls[name.upper()]
        except KeyError:
            raise ModeError(
                "unknown parallel mode",
                invalid_name=name,
                available_modes=list_parallel_modes(),
            )


def list_parallel_modes() -> list[str]:
    """Return available parallel mode names."""
    return [mode.value for mode in ParallelMode]


def map_texts(
    encode_one: Callable[[TextInput], list[Token]],
    texts: list[TextInput],
    num_workers: int | None = None,
    parallel_mode: "ParallelStrategy | ParallelMode" = "auto",
) -> list[list[Token]]:
    """
    Run ``encode_one`` over ``texts`` and return results in input order.

    Work is split across texts, never inside one text, because merges can
    span arbitrary byte boundaries.
    """
    mode = ParallelMode.get(parallel_mode)

    if num_workers is None:
        workers = os.cpu_count() or 1
    else:
        workers = max(1, num_workers)

    def process_batch() -> list[list[Token]]:
        """Encode all texts concurrently at the batch level."""
        log.debug(f"encoding {len(texts)} texts with {workers} workers")
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(encode_one, texts))

    match mode:
        case ParallelMode.OFF:
            return [encode_one(text) for text in texts]
        case ParallelMode.BATCH:
            return process_batch()
        case ParallelMode.AUTO:
            if len(texts) <= 1 or workers == 1:
                return [encode_one(text) for text in texts]
            return process_batch()


__all__ = [
    "ParallelStrategy",
    "ParallelMode",
    "list_parallel_modes",
    "map_texts",
]
