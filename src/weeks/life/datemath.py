"""Date arithmetic for the life-in-weeks numbers.

All functions are pure. ``now`` is always passed in so callers (and tests)
control the clock.
"""

from datetime import date, datetime

from .models import LifeStats

LIFE_EXPECTANCY_YEARS = 80
WEEKS_PER_YEAR = 52
TOTAL_LIFE_WEEKS = LIFE_EXPECTANCY_YEARS * WEEKS_PER_YEAR

BIRTH_DATE_FORMAT = "%Y-%m-%d"


def parse_birth_date(text: str | None) -> date | None:
    """Parse a persisted ``yyyy-MM-dd`` birth date.

    Args:
        text: The stored string, possibly empty or missing.

    Returns:
        The calendar date, or None when unset or unparseable.
    """
    if not text:
        return None
    try:
        return datetime.strptime(text.strip(), BIRTH_DATE_FORMAT).date()
    except ValueError:
        return None


def format_birth_date(birth_date: date) -> str:
    """Format a birth date for storage."""
    return birth_date.strftime(BIRTH_DATE_FORMAT)


def _as_date(now: datetime | date) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def days_between(birth_date: date, now: datetime | date) -> int:
    """Whole days from birth_date to now (negative if now is earlier)."""
    return (_as_date(now) - birth_date).days


def age(birth_date: date | None, now: datetime | date) -> int:
    """Full years elapsed since birth_date."""
    if birth_date is None:
        return 0

    today = _as_date(now)
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return max(years, 0)


def weeks_lived(birth_date: date | None, now: datetime | date) -> int:
    """Complete weeks lived; never negative."""
    if birth_date is None:
        return 0

    days = days_between(birth_date, now)
    if days < 0:
        return 0
    return days // 7


def weeks_remaining(lived: int) -> int:
    """Weeks left out of TOTAL_LIFE_WEEKS, floored at zero."""
    return max(TOTAL_LIFE_WEEKS - lived, 0)


def percentage(lived: int) -> str:
    """Share of TOTAL_LIFE_WEEKS already lived, one decimal.

    Not clamped: past the expected lifespan this goes above "100.0".
    """
    return f"{lived / TOTAL_LIFE_WEEKS * 100:.1f}"


def compute_stats(birth_date: date | None, now: datetime | date) -> LifeStats:
    """Compute all four life numbers for birth_date at now."""
    lived = weeks_lived(birth_date, now)
    return LifeStats(
        age=age(birth_date, now),
        weeks_lived=lived,
        weeks_remaining=weeks_remaining(lived),
        percentage=percentage(lived),
    )
