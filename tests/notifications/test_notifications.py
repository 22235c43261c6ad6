"""Tests for notification payloads and the navigation trigger."""

from datetime import datetime

import pytest

from weeks.notifications import (
    DAILY_REFLECTION_NOTIFICATION_ID,
    WEEKLY_NOTIFICATION_ID,
    NavigationTrigger,
    NotificationSchedule,
    daily_reflection_notification,
    weekly_body,
    weekly_notification,
)

NOW = datetime(2025, 4, 12, 12, 0)


class TestWeeklyNotification:
    def test_none_without_birthday(self):
        assert weekly_notification("", NOW) is None

    def test_body_has_weeks_left(self):
        request = weekly_notification("1975-04-25", NOW)
        assert request is not None
        assert request.identifier == WEEKLY_NOTIFICATION_ID
        assert request.title == "Life in Weeks"
        assert request.body == "Another Week Over, A New One Just Begun: 1,553 weeks left."

    def test_sunday_morning(self):
        request = weekly_notification("1975-04-25", NOW)
        assert request.schedule == NotificationSchedule(hour=9, minute=0, weekday=0)

    def test_custom_time(self):
        request = weekly_notification("1975-04-25", NOW, hour=7, minute=30)
        assert request.schedule.hour == 7
        assert request.schedule.minute == 30

    def test_unparseable_birthday_counts_from_today(self):
        request = weekly_notification("garbage", NOW)
        assert request is not None
        assert request.body == weekly_body(4160)


class TestDailyReflectionNotification:
    def test_payload(self):
        request = daily_reflection_notification()
        assert request.identifier == DAILY_REFLECTION_NOTIFICATION_ID
        assert request.title == "Daily Reflection"
        assert "Another Day Wasted or Something Meaningful" in request.body
        assert request.user_info == {"notificationType": "dailyReflection"}

    def test_every_evening(self):
        request = daily_reflection_notification()
        assert request.schedule == NotificationSchedule(hour=20, minute=0, weekday=None)


class TestNotificationSchedule:
    @pytest.mark.parametrize(
        "kwargs",
        [{"hour": 24}, {"hour": -1}, {"hour": 9, "minute": 60}, {"hour": 9, "weekday": 7}],
    )
    def test_rejects_out_of_range(self, kwargs):
        with pytest.raises(ValueError):
            NotificationSchedule(**kwargs)


class TestNavigationTrigger:
    def test_starts_clear(self):
        assert NavigationTrigger().consume() is False

    def test_daily_reflection_tap_raises_trigger(self):
        trigger = NavigationTrigger()
        assert trigger.handle_notification_tap({"notificationType": "dailyReflection"})
        assert trigger.pending is True

    def test_other_taps_ignored(self):
        trigger = NavigationTrigger()
        assert trigger.handle_notification_tap({}) is False
        assert trigger.handle_notification_tap({"notificationType": "weekly"}) is False
        assert trigger.pending is False

    def test_consumed_once(self):
        trigger = NavigationTrigger()
        trigger.handle_notification_tap({"notificationType": "dailyReflection"})
        assert trigger.consume() is True
        assert trigger.consume() is False
