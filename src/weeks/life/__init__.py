"""Life-in-weeks arithmetic and the stats cache."""

from .cache import LifeStatsCache
from .datemath import (
    TOTAL_LIFE_WEEKS,
    age,
    compute_stats,
    format_birth_date,
    parse_birth_date,
    percentage,
    weeks_lived,
    weeks_remaining,
)
from .models import CachedStats, LifeStats

__all__ = [
    "CachedStats",
    "LifeStats",
    "LifeStatsCache",
    "TOTAL_LIFE_WEEKS",
    "age",
    "compute_stats",
    "format_birth_date",
    "parse_birth_date",
    "percentage",
    "weeks_lived",
    "weeks_remaining",
]
