"""Application configuration.

Values come from environment variables (a ``.env`` file is loaded by the
entry point) with defaults under ``~/.weeks``.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".weeks"
LOCALTIME_PATH = Path("/etc/localtime")


@dataclass
class WeeksConfig:
    """Configuration for Weeks.

    Attributes:
        data_dir: Directory holding the database, preferences and logs.
        weekly_hour: Hour of the Sunday "weeks left" reminder.
        weekly_minute: Minute of the Sunday reminder.
        daily_hour: Hour of the daily reflection prompt.
        daily_minute: Minute of the daily reflection prompt.
        timezone: IANA zone name for the notification times. The system
            zone if None.
    """

    data_dir: Path | None = None
    weekly_hour: int = 9
    weekly_minute: int = 0
    daily_hour: int = 20
    daily_minute: int = 0
    timezone: str | None = None

    def __post_init__(self) -> None:
        """Validate config and set defaults."""
        if self.data_dir is None:
            self.data_dir = DEFAULT_DATA_DIR

        for name in ("weekly_hour", "daily_hour"):
            if not 0 <= getattr(self, name) <= 23:
                raise ValueError(f"{name} must be between 0 and 23")
        for name in ("weekly_minute", "daily_minute"):
            if not 0 <= getattr(self, name) <= 59:
                raise ValueError(f"{name} must be between 0 and 59")

    @property
    def db_path(self) -> Path:
        assert self.data_dir is not None
        return self.data_dir / "reflections.db"

    @property
    def preferences_path(self) -> Path:
        assert self.data_dir is not None
        return self.data_dir / "preferences.json"

    @property
    def log_dir(self) -> Path:
        assert self.data_dir is not None
        return self.data_dir / "logs"

    @property
    def tz(self) -> tzinfo:
        """Zone the notification times are given in."""
        return resolve_timezone(self.timezone)


def resolve_timezone(name: str | None) -> tzinfo:
    """Look up a time zone by name, falling back to the system zone.

    Returns a ZoneInfo whenever one can be found. The current fixed UTC
    offset is used only when the system zone cannot be read.
    """
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown time zone %r, using the system zone", name)

    try:
        with open(LOCALTIME_PATH, "rb") as f:
            return ZoneInfo.from_file(f, key="localtime")
    except (OSError, ValueError) as e:
        logger.warning("Cannot read system time zone: %s. Using a fixed offset.", e)

    local = datetime.now().astimezone().tzinfo
    assert local is not None
    return local


def _int_from_env(name: str, default: int, maximum: int) -> int:
    """Read an integer variable in 0..maximum, keeping the default otherwise."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default

    if not 0 <= value <= maximum:
        logger.warning("Ignoring %s=%d: must be between 0 and %d", name, value, maximum)
        return default
    return value


def config_from_env() -> WeeksConfig:
    """Load configuration from environment variables."""
    home = os.getenv("WEEKS_HOME")
    return WeeksConfig(
        data_dir=Path(home).expanduser() if home else None,
        weekly_hour=_int_from_env("WEEKS_WEEKLY_HOUR", 9, 23),
        daily_hour=_int_from_env("WEEKS_DAILY_HOUR", 20, 23),
        timezone=os.getenv("WEEKS_TIMEZONE") or None,
    )
