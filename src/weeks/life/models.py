"""Data models for life statistics."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class LifeStats:
    """The numbers shown above the weeks grid.

    Attributes:
        age: Full years lived.
        weeks_lived: Complete weeks since birth.
        weeks_remaining: Weeks left of the expected lifespan, never negative.
        percentage: Share of the lifespan lived, formatted with one decimal.
    """

    age: int = 0
    weeks_lived: int = 0
    weeks_remaining: int = 0
    percentage: str = "0.0"


@dataclass(frozen=True)
class CachedStats:
    """LifeStats as last computed, with the time of computation."""

    stats: LifeStats
    last_computed_at: datetime

    @property
    def age(self) -> int:
        return self.stats.age

    @property
    def weeks_lived(self) -> int:
        return self.stats.weeks_lived

    @property
    def weeks_remaining(self) -> int:
        return self.stats.weeks_remaining

    @property
    def percentage(self) -> str:
        return self.stats.percentage
