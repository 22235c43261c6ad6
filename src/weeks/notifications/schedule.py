"""Notification payloads and the times they repeat at."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..life.datemath import compute_stats, parse_birth_date

WEEKLY_NOTIFICATION_ID = "weeklyLifeUpdateNotification"
DAILY_REFLECTION_NOTIFICATION_ID = "dailyReflectionNotification"

NOTIFICATION_TYPE_KEY = "notificationType"
DAILY_REFLECTION_TYPE = "dailyReflection"

SUNDAY = 0


@dataclass(frozen=True)
class NotificationSchedule:
    """When a repeating notification fires.

    Attributes:
        hour: Hour of day, 0-23.
        minute: Minute of hour, 0-59.
        weekday: Day of week with 0 = Sunday, or None for every day.
    """

    hour: int
    minute: int = 0
    weekday: int | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23:
            raise ValueError("hour must be between 0 and 23")
        if not 0 <= self.minute <= 59:
            raise ValueError("minute must be between 0 and 59")
        if self.weekday is not None and not 0 <= self.weekday <= 6:
            raise ValueError("weekday must be between 0 (Sunday) and 6")


@dataclass(frozen=True)
class NotificationRequest:
    """A repeating notification to hand to whatever delivers it."""

    identifier: str
    title: str
    body: str
    schedule: NotificationSchedule
    user_info: dict[str, Any] = field(default_factory=dict)


def weekly_body(weeks_remaining: int) -> str:
    """Text of the weekly reminder."""
    return f"Another Week Over, A New One Just Begun: {weeks_remaining:,} weeks left."


def weekly_notification(
    birthday_string: str,
    now: datetime,
    hour: int = 9,
    minute: int = 0,
) -> NotificationRequest | None:
    """Build the Sunday reminder with the weeks left.

    Returns None when no birthday is set. A birthday that cannot be parsed
    is counted from today, which leaves the full lifespan remaining.
    """
    if not birthday_string:
        return None

    birth_date = parse_birth_date(birthday_string) or now.date()
    remaining = compute_stats(birth_date, now).weeks_remaining

    return NotificationRequest(
        identifier=WEEKLY_NOTIFICATION_ID,
        title="Life in Weeks",
        body=weekly_body(remaining),
        schedule=NotificationSchedule(hour=hour, minute=minute, weekday=SUNDAY),
    )


def daily_reflection_notification(hour: int = 20, minute: int = 0) -> NotificationRequest:
    """Build the evening prompt asking for a reflection."""
    return NotificationRequest(
        identifier=DAILY_REFLECTION_NOTIFICATION_ID,
        title="Daily Reflection",
        body="What did you get done today? Another Day Wasted or Something Meaningful",
        schedule=NotificationSchedule(hour=hour, minute=minute),
        user_info={NOTIFICATION_TYPE_KEY: DAILY_REFLECTION_TYPE},
    )
