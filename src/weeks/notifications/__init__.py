"""Weekly and daily notifications."""

from .schedule import (
    DAILY_REFLECTION_NOTIFICATION_ID,
    DAILY_REFLECTION_TYPE,
    NOTIFICATION_TYPE_KEY,
    WEEKLY_NOTIFICATION_ID,
    NotificationRequest,
    NotificationSchedule,
    daily_reflection_notification,
    weekly_body,
    weekly_notification,
)
from .trigger import NavigationTrigger

__all__ = [
    "DAILY_REFLECTION_NOTIFICATION_ID",
    "DAILY_REFLECTION_TYPE",
    "NOTIFICATION_TYPE_KEY",
    "NavigationTrigger",
    "NotificationRequest",
    "NotificationSchedule",
    "WEEKLY_NOTIFICATION_ID",
    "daily_reflection_notification",
    "weekly_body",
    "weekly_notification",
]
