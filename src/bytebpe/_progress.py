"""Switch and helpers for training progress logs."""

import logging
import os

log = logging.getLogger(__name__)

# number of progress lines per training run
N_MILESTONES = 10

_enabled: bool = True


def enable_progress() -> None:
    """Enable training progress logging for all bytebpe operations."""
    global _enabled
    _enabled = True


def disable_progress() -> None:
    """Disable training progress logging for all bytebpe operations."""
    global _enabled
    _enabled = False


def _is_enabled() -> bool:
    """Check if progress is enabled (``BYTEBPE_DISABLE_PROGRESS=1`` forces it off)."""
    if os.environ.get("BYTEBPE_DISABLE_PROGRESS", "").strip() == "1":
        return False
    return _enabled


def report_merge_progress(done: int, total: int) -> None:
    """Log ``done/total`` at roughly every tenth of the run and on the last merge."""
    if not _is_enabled() or total <= 0:
        return
    step = max(1, total // N_MILESTONES)
    if done % step == 0 or done == total:
        log.info(f"learned {done}/{total} merges")
