"""Composition root wiring storage, stats cache and notifications together."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime

from .config import WeeksConfig
from .life import CachedStats, LifeStatsCache, format_birth_date, parse_birth_date
from .logging import JSONLLogger, get_logger
from .notifications import (
    NavigationTrigger,
    NotificationRequest,
    daily_reflection_notification,
    weekly_notification,
)
from .preferences import BIRTHDAY_KEY, PreferenceStore
from .reflections import Reflection, ReflectionStore, ReflectionType


class WeeksApp:
    """Owns every stateful component of the application.

    Front ends (CLI, Telegram bot) create one WeeksApp and go through it, so
    there is exactly one stats cache and one reflection store per process.
    """

    def __init__(
        self,
        config: WeeksConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        logger: JSONLLogger | None = None,
    ) -> None:
        """Initialize the app and open its stores.

        Args:
            config: Paths and notification times. Defaults if None.
            clock: Returns the current time. datetime.now if None.
            logger: Event logger. The global logger if None.
        """
        self.config = config or WeeksConfig()
        self.clock = clock or datetime.now
        self.logger = logger or get_logger()

        self.preferences = PreferenceStore(self.config.preferences_path)
        self.stats_cache = LifeStatsCache(self.preferences, on_update=self._log_stats_update)
        self.reflections = ReflectionStore(self.config.db_path)
        self.reflections.init_db()
        self.navigation = NavigationTrigger()

    # Birthday

    @property
    def birthday_string(self) -> str:
        """The stored birthday, empty when unset."""
        value = self.preferences.get(BIRTHDAY_KEY, "")
        return value if isinstance(value, str) else ""

    @property
    def birth_date(self) -> date | None:
        return parse_birth_date(self.birthday_string)

    def set_birthday(self, birth_date: date) -> CachedStats:
        """Store a new birthday and recompute the stats right away."""
        text = format_birth_date(birth_date)
        self.preferences.set(BIRTHDAY_KEY, text)
        self.preferences.save()
        self.logger.log("birthday_set", birthday=text)
        return self.stats_cache.update(birth_date, self.clock())

    def clear_birthday(self) -> CachedStats:
        """Forget the birthday; stats fall back to the default state."""
        self.preferences.remove(BIRTHDAY_KEY)
        self.preferences.save()
        self.logger.log("birthday_cleared")
        return self.stats_cache.update(None, self.clock())

    # Stats

    def stats(self, force: bool = False) -> CachedStats:
        """Current life stats, recomputed only when stale or forced."""
        birth_date = self.birth_date
        now = self.clock()
        if force:
            return self.stats_cache.update(birth_date, now)
        return self.stats_cache.refresh(birth_date, now)

    def _log_stats_update(self, cached: CachedStats) -> None:
        self.logger.log_stats_update(
            cached.weeks_lived,
            cached.weeks_remaining,
            birthday=self.birthday_string or None,
        )

    # Reflections

    def add_reflection(
        self,
        type: ReflectionType,
        explanation: str,
        chat_id: str | None = None,
    ) -> Reflection:
        """Store a reflection dated now."""
        reflection = self.reflections.create(type, explanation, now=self.clock())
        self.logger.log_reflection(
            "created", reflection.id, chat_id=chat_id, type=type.label
        )
        return reflection

    def list_reflections(self, limit: int | None = None) -> list[Reflection]:
        return self.reflections.list(limit=limit)

    def get_reflection(self, reflection_id: int) -> Reflection | None:
        return self.reflections.get(reflection_id)

    def delete_reflection(
        self,
        reflection: Reflection | int,
        chat_id: str | None = None,
    ) -> bool:
        """Delete a reflection. Returns False if it was already gone."""
        deleted = self.reflections.delete(reflection)
        reflection_id = reflection.id if isinstance(reflection, Reflection) else reflection
        self.logger.log_reflection(
            "deleted", reflection_id, chat_id=chat_id, found=deleted
        )
        return deleted

    # Notifications

    def weekly_notification(self) -> NotificationRequest | None:
        return weekly_notification(
            self.birthday_string,
            self.clock(),
            hour=self.config.weekly_hour,
            minute=self.config.weekly_minute,
        )

    def daily_notification(self) -> NotificationRequest:
        return daily_reflection_notification(
            hour=self.config.daily_hour,
            minute=self.config.daily_minute,
        )

    def close(self) -> None:
        """Close the reflection database."""
        self.reflections.close()
