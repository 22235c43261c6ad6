"""Persistent cache of the last computed life statistics."""

import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta

from ..preferences import PreferenceStore
from .datemath import TOTAL_LIFE_WEEKS, compute_stats
from .models import CachedStats, LifeStats

logger = logging.getLogger(__name__)

AGE_KEY = "cachedAge"
WEEKS_LIVED_KEY = "cachedWeeksLived"
WEEKS_REMAINING_KEY = "cachedWeeksRemaining"
PERCENTAGE_KEY = "cachedPercentage"
LAST_UPDATE_KEY = "lastStatsUpdate"

UPDATE_INTERVAL = timedelta(days=7)


def default_stats() -> LifeStats:
    """Stats for an unset birth date."""
    return LifeStats(weeks_remaining=TOTAL_LIFE_WEEKS)


class LifeStatsCache:
    """Stores the last LifeStats so they are not recomputed on every read.

    The cached value lives in a PreferenceStore, so it survives restarts and
    a cold start can show numbers before anything is recomputed.

    Staleness is measured as wall-clock time since the last computation,
    not calendar week boundaries, so a refresh can land up to six days
    after a new week starts.
    """

    def __init__(
        self,
        preferences: PreferenceStore,
        on_update: Callable[[CachedStats], None] | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            preferences: Store holding the cached values.
            on_update: Called with the new stats after every recomputation.
        """
        self.preferences = preferences
        self.on_update = on_update

    @property
    def current(self) -> CachedStats | None:
        """The last stored stats, or None if nothing was computed yet."""
        raw_timestamp = self.preferences.get(LAST_UPDATE_KEY)
        if raw_timestamp is None:
            return None

        try:
            stats = LifeStats(
                age=int(self.preferences.get(AGE_KEY, 0)),
                weeks_lived=int(self.preferences.get(WEEKS_LIVED_KEY, 0)),
                weeks_remaining=int(self.preferences.get(WEEKS_REMAINING_KEY, 0)),
                percentage=str(self.preferences.get(PERCENTAGE_KEY, "0.0")),
            )
            last_computed_at = datetime.fromisoformat(raw_timestamp)
        except (TypeError, ValueError) as e:
            logger.warning("Discarding unreadable cached stats: %s", e)
            return None

        return CachedStats(stats=stats, last_computed_at=last_computed_at)

    def needs_update(self, birth_date: date | None, now: datetime) -> bool:
        """Check whether the cached stats should be recomputed.

        Args:
            birth_date: The configured birth date, None if unset.
            now: Current time.

        Returns:
            True when nothing is cached, when the birth date is unset but the
            cache holds non-default numbers, or when at least a week has
            passed since the last computation.
        """
        cached = self.current
        if cached is None:
            return True

        if birth_date is None and cached.stats != default_stats():
            return True

        return now - cached.last_computed_at >= UPDATE_INTERVAL

    def update(self, birth_date: date | None, now: datetime) -> CachedStats:
        """Recompute, store and return the stats.

        Call this whenever the birth date changes, whatever needs_update says.
        """
        cached = CachedStats(
            stats=compute_stats(birth_date, now),
            last_computed_at=now,
        )

        self.preferences.set(AGE_KEY, cached.age)
        self.preferences.set(WEEKS_LIVED_KEY, cached.weeks_lived)
        self.preferences.set(WEEKS_REMAINING_KEY, cached.weeks_remaining)
        self.preferences.set(PERCENTAGE_KEY, cached.percentage)
        self.preferences.set(LAST_UPDATE_KEY, now.isoformat())
        self.preferences.save()

        logger.debug("Recomputed life stats: %s", cached.stats)
        if self.on_update is not None:
            self.on_update(cached)
        return cached

    def refresh(self, birth_date: date | None, now: datetime) -> CachedStats:
        """Return the cached stats, recomputing first if they are stale."""
        if self.needs_update(birth_date, now):
            return self.update(birth_date, now)

        cached = self.current
        assert cached is not None
        return cached
