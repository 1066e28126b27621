"""Tests for reminder settings and next fire time."""

from datetime import datetime

from setaside.sdk import ReminderSettings, next_reminder


class TestReminderSettings:

    def test_defaults(self):
        settings = ReminderSettings()
        assert (settings.day, settings.hour, settings.minute) == (10, 9, 0)

    def test_values_clamped(self):
        settings = ReminderSettings(day=31, hour=25, minute=-3)
        assert (settings.day, settings.hour, settings.minute) == (28, 23, 0)

    def test_day_at_least_one(self):
        assert ReminderSettings(day=0).day == 1


class TestNextReminder:

    def test_later_this_month(self):
        assert next_reminder(ReminderSettings(), datetime(2024, 3, 5, 12, 0)) == datetime(2024, 3, 10, 9, 0)

    def test_exactly_at_fire_time_moves_to_next_month(self):
        assert next_reminder(ReminderSettings(), datetime(2024, 3, 10, 9, 0)) == datetime(2024, 4, 10, 9, 0)

    def test_december_wraps_to_january(self):
        assert next_reminder(ReminderSettings(), datetime(2024, 12, 20)) == datetime(2025, 1, 10, 9, 0)

    def test_day_28_in_february(self):
        settings = ReminderSettings(day=28, hour=18, minute=30)
        assert next_reminder(settings, datetime(2023, 1, 29)) == datetime(2023, 2, 28, 18, 30)
