"""Shared baseline estimation for a batch of characters.

Characters are rendered with different vertical extents (descenders,
ascenders, punctuation) but most of a charset sits on the same source row.
The most frequent bottom row is taken as the baseline for the whole batch.
"""

from collections import Counter
from collections.abc import Iterable

import structlog

logger = structlog.get_logger(__name__)


def compute_baseline(max_ys: Iterable[int], fallback: int) -> int:
    """Compute the shared baseline row of a batch.

    Empty characters (max_y == -1) are ignored. When several rows share the
    highest frequency the smallest row wins, so the result does not depend
    on input order.

    Args:
        max_ys: Bottom rows of every processed character
        fallback: Row used when no character contributed a bottom row

    Returns:
        Baseline row in source bitmap coordinates
    """
    counts = Counter(y for y in max_ys if y != -1)
    if not counts:
        logger.warning("Could not determine baseline, using fallback", baseline=fallback)
        return fallback

    best_count = max(counts.values())
    baseline = min(y for y, count in counts.items() if count == best_count)

    logger.debug(
        "Baseline calibrated",
        baseline=baseline,
        votes=best_count,
        samples=sum(counts.values()),
    )
    return baseline
