"""Tests for the typed business settings."""

import pytest
from pydantic import ValidationError

from app.schemas.settings import (
    BusinessSettings,
    DayHours,
    clock_to_minutes,
    minutes_to_clock,
    parse_hours_table,
)


def test_clock_round_trip_values():
    assert clock_to_minutes("09:30") == 570
    assert minutes_to_clock(570) == "09:30"
    assert clock_to_minutes("00:00") == 0


@pytest.mark.parametrize("bad", ["9:30", "24:00", "12:60", "", "noon"])
def test_clock_rejects_malformed(bad):
    with pytest.raises(ValueError):
        clock_to_minutes(bad)


def test_day_must_close_after_it_opens():
    with pytest.raises(ValidationError):
        DayHours(open="18:00", close="09:00")


def test_closed_day_skips_range_check():
    day = DayHours(open="18:00", close="09:00", closed=True)
    assert day.closed


def test_api_input_fills_omitted_days_as_closed():
    s = BusinessSettings(hours={"mon": {"open": "10:00", "close": "16:00"}})
    assert s.hours["mon"].open == "10:00"
    assert s.hours["sun"].closed is True


def test_api_input_rejects_unknown_weekday():
    with pytest.raises(ValidationError):
        BusinessSettings(hours={"funday": {"open": "10:00", "close": "16:00"}})


def test_defaults():
    s = BusinessSettings()
    assert all(not day.closed for day in s.hours.values())
    assert s.hours["wed"].open == "09:00"
    assert s.hours["wed"].close == "19:00"
    assert s.notifications.email_confirmation is True
    assert s.notifications.email_reminders is True
    assert s.notifications.sms_on_call is True


class TestFromStorage:
    def test_none_gives_defaults(self):
        s = BusinessSettings.from_storage(None)
        assert s.hours["mon"].open == "09:00"

    def test_missing_hours_falls_back_to_default_week(self):
        s = BusinessSettings.from_storage({"notifications": {"sms_on_call": False}})
        assert s.hours["sat"].closed is False
        assert s.notifications.sms_on_call is False

    def test_malformed_weekday_is_closed_not_an_error(self):
        s = BusinessSettings.from_storage({
            "hours": {
                "mon": {"open": "nine", "close": "19:00"},
                "tue": {"open": "09:00", "close": "17:00"},
            }
        })
        assert s.hours["mon"].closed is True
        assert s.hours["tue"].close == "17:00"
        assert s.hours["wed"].closed is True

    def test_garbage_notifications_use_defaults(self):
        s = BusinessSettings.from_storage({"notifications": {"email_reminders": "sometimes"}})
        assert s.notifications.email_reminders is True

    def test_round_trip_through_storage(self):
        original = BusinessSettings(hours={"fri": {"open": "08:00", "close": "12:00"}})
        restored = BusinessSettings.from_storage(original.to_storage())
        assert restored.hours["fri"].open == "08:00"
        assert restored.hours["mon"].closed is True


def test_parse_hours_table_non_dict():
    table = parse_hours_table(["mon"])
    assert all(day.closed for day in table.values())
