"""Reusable decorators for training utilities."""

import functools
import logging
import time
from typing import Callable

log = logging.getLogger(__name__)


def measure_time(func: Callable) -> Callable:
    """Log wall time of every call to ``func``, including calls that raise."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        name = func.__qualname__
        log.debug(f"{name} started")
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start
            log.info(f"{name} completed in {elapsed:.2f} s ({elapsed / 60:.2f} mins)")

    return wrapper
