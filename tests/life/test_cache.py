"""Tests for LifeStatsCache."""

from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from weeks.life import LifeStats, LifeStatsCache
from weeks.life.cache import AGE_KEY, LAST_UPDATE_KEY, WEEKS_LIVED_KEY
from weeks.preferences import PreferenceStore

NOW = datetime(2025, 4, 12, 12, 0)
BIRTH = date(1975, 4, 25)


@pytest.fixture
def preferences(tmp_path: Path) -> PreferenceStore:
    return PreferenceStore(tmp_path / "preferences.json")


@pytest.fixture
def cache(preferences: PreferenceStore) -> LifeStatsCache:
    return LifeStatsCache(preferences)


class TestNeedsUpdate:
    def test_true_without_prior_computation(self, cache: LifeStatsCache):
        assert cache.current is None
        assert cache.needs_update(BIRTH, NOW) is True

    def test_false_right_after_update(self, cache: LifeStatsCache):
        cache.update(BIRTH, NOW)
        assert cache.needs_update(BIRTH, NOW) is False

    def test_false_within_a_week(self, cache: LifeStatsCache):
        cache.update(BIRTH, NOW)
        almost = NOW + timedelta(days=6, hours=23, minutes=59)
        assert cache.needs_update(BIRTH, almost) is False

    def test_true_after_seven_days(self, cache: LifeStatsCache):
        cache.update(BIRTH, NOW)
        assert cache.needs_update(BIRTH, NOW + timedelta(days=7)) is True
        assert cache.needs_update(BIRTH, NOW + timedelta(days=30)) is True

    def test_true_when_birthday_cleared(self, cache: LifeStatsCache):
        cache.update(BIRTH, NOW)
        assert cache.needs_update(None, NOW) is True

    def test_false_when_unset_and_already_default(self, cache: LifeStatsCache):
        cache.update(None, NOW)
        assert cache.needs_update(None, NOW + timedelta(days=1)) is False

    def test_unreadable_cache_counts_as_missing(
        self, preferences: PreferenceStore, cache: LifeStatsCache
    ):
        preferences.set(LAST_UPDATE_KEY, "yesterday-ish")
        assert cache.current is None
        assert cache.needs_update(BIRTH, NOW) is True


class TestUpdate:
    def test_returns_computed_stats(self, cache: LifeStatsCache):
        cached = cache.update(BIRTH, NOW)
        assert cached.stats == LifeStats(
            age=49, weeks_lived=2607, weeks_remaining=1553, percentage="62.7"
        )
        assert cached.last_computed_at == NOW

    def test_overwrites_previous_value(self, cache: LifeStatsCache):
        cache.update(BIRTH, NOW)
        cached = cache.update(None, NOW + timedelta(hours=1))
        assert cache.current == cached
        assert cached.weeks_lived == 0
        assert cached.weeks_remaining == 4160

    def test_persists_across_instances(self, tmp_path: Path, cache: LifeStatsCache):
        cached = cache.update(BIRTH, NOW)

        reloaded = LifeStatsCache(PreferenceStore(tmp_path / "preferences.json"))
        assert reloaded.current == cached

    def test_writes_fixed_keys(self, preferences: PreferenceStore, cache: LifeStatsCache):
        cache.update(BIRTH, NOW)
        assert preferences.get(AGE_KEY) == 49
        assert preferences.get(WEEKS_LIVED_KEY) == 2607
        assert preferences.get(LAST_UPDATE_KEY) == NOW.isoformat()


class TestRefresh:
    def test_keeps_fresh_value(self, cache: LifeStatsCache):
        first = cache.update(BIRTH, NOW)
        # Not stale yet, so the old numbers are served as-is.
        assert cache.refresh(date(2000, 1, 1), NOW + timedelta(days=1)) == first

    def test_recomputes_stale_value(self, cache: LifeStatsCache):
        cache.update(BIRTH, NOW)
        later = NOW + timedelta(days=7)
        refreshed = cache.refresh(BIRTH, later)
        assert refreshed.last_computed_at == later
        assert refreshed.weeks_lived == 2608


class TestOnUpdate:
    def test_called_on_every_recomputation(self, preferences: PreferenceStore):
        seen = []
        cache = LifeStatsCache(preferences, on_update=seen.append)

        first = cache.update(BIRTH, NOW)
        second = cache.refresh(BIRTH, NOW + timedelta(days=7))

        assert seen == [first, second]

    def test_not_called_when_refresh_serves_cache(self, preferences: PreferenceStore):
        seen = []
        cache = LifeStatsCache(preferences, on_update=seen.append)
        cache.update(BIRTH, NOW)

        cache.refresh(BIRTH, NOW + timedelta(days=3))
        assert len(seen) == 1
