"""Running visibility score: an exponential moving average per site."""

import asyncio
import logging
import math
from collections.abc import Sequence

from geo_visibility.data import ProviderResult
from geo_visibility.store.base import CheckStore

logger = logging.getLogger(__name__)

DEFAULT_OLD_WEIGHT = 0.7


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def compute_new_score(results: Sequence[ProviderResult]) -> int | None:
    """Percentage of valid attempts that cited the domain.

    Unconfigured and errored results are excluded from the denominator.
    Returns None when there is no valid attempt.
    """
    valid = [r for r in results if r.is_valid_attempt]
    if not valid:
        return None
    cited = sum(1 for r in valid if r.cited)
    return round_half_up(cited / len(valid) * 100)


def blend_score(old: int | None, new: int, *, old_weight: float = DEFAULT_OLD_WEIGHT) -> int:
    """Blend a new cycle score into the running score.

    The first score ever recorded is taken as-is.
    """
    if old is None:
        return new
    return round_half_up(old_weight * old + (1 - old_weight) * new)


class ScoreAggregator:
    """Serializes running-score updates per site.

    Updates for the same site hold a shared lock around the read-blend-write
    sequence; different sites never wait on each other.

    Args:
        old_weight: Weight of the previous running score in the blend.
    """

    def __init__(self, old_weight: float = DEFAULT_OLD_WEIGHT) -> None:
        if not 0.0 <= old_weight < 1.0:
            raise ValueError(f"old_weight must be in [0, 1), got {old_weight}")
        self._old_weight = old_weight
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, site_id: str) -> asyncio.Lock:
        lock = self._locks.get(site_id)
        if lock is None:
            lock = self._locks[site_id] = asyncio.Lock()
        return lock

    async def update(
        self, store: CheckStore, site_id: str, results: Sequence[ProviderResult]
    ) -> int | None:
        """Fold one cycle's results into the site's running score.

        Returns:
            The new running score, or None when the cycle had no valid
            attempt and the stored score was left untouched.
        """
        new_score = compute_new_score(results)
        if new_score is None:
            logger.info(f"No valid attempts for site {site_id}, running score unchanged")
            return None

        async with self._lock_for(site_id):
            old = await store.get_running_score(site_id)
            blended = blend_score(old, new_score, old_weight=self._old_weight)
            await store.set_running_score(site_id, blended)

        logger.info(f"Running score for site {site_id}: {old} -> {blended} (cycle {new_score})")
        return blended
