"""Tests for the slot availability engine."""

from datetime import date, datetime

import pytest

from app.schemas.settings import DayHours, default_hours
from app.services.slots import effective_hours, generate_slots, weekday_key

MONDAY = date(2026, 1, 5)


def _all_day_slots():
    return [f"{h:02d}:{m:02d}" for h in range(9, 19) for m in (0, 30)]


def test_weekday_key():
    assert weekday_key(MONDAY) == "mon"
    assert weekday_key(date(2026, 1, 11)) == "sun"


def test_open_day_without_bookings_lists_every_half_hour():
    slots = generate_slots(default_hours(), MONDAY)
    assert slots == _all_day_slots()
    assert slots[0] == "09:00"
    assert slots[-1] == "18:30"


def test_existing_appointment_removes_only_its_start_time():
    """09:00-19:00, one appointment at 10:00."""
    slots = generate_slots(default_hours(), MONDAY, [datetime(2026, 1, 5, 10, 0)])

    assert "09:00" in slots
    assert "09:30" in slots
    assert "10:00" not in slots
    assert "10:30" in slots
    assert slots[-1] == "18:30"
    assert "19:00" not in slots
    assert len(slots) == len(_all_day_slots()) - 1


def test_bookings_on_other_dates_are_ignored():
    slots = generate_slots(default_hours(), MONDAY, [datetime(2026, 1, 6, 10, 0)])
    assert "10:00" in slots


def test_closed_day_has_no_slots():
    hours = default_hours()
    hours["mon"] = DayHours.closed_day()
    assert generate_slots(hours, MONDAY) == []


def test_missing_day_has_no_slots():
    hours = default_hours()
    del hours["mon"]
    assert generate_slots(hours, MONDAY) == []


def test_malformed_clock_is_treated_as_closed():
    hours = default_hours()
    hours["mon"] = DayHours.model_construct(open="9am", close="19:00", closed=False)
    assert generate_slots(hours, MONDAY) == []


def test_last_slot_starts_before_closing():
    hours = {"mon": DayHours(open="09:00", close="10:15")}
    assert generate_slots(hours, MONDAY) == ["09:00", "09:30", "10:00"]


def test_custom_granularity():
    hours = {"mon": DayHours(open="09:00", close="10:00")}
    assert generate_slots(hours, MONDAY, granularity_minutes=15) == ["09:00", "09:15", "09:30", "09:45"]


def test_non_positive_granularity_rejected():
    with pytest.raises(ValueError):
        generate_slots(default_hours(), MONDAY, granularity_minutes=0)


def test_service_duration_is_not_considered():
    # A 10:00 booking does not block 09:30 even if the 09:30 service runs long
    slots = generate_slots(default_hours(), MONDAY, [datetime(2026, 1, 5, 10, 0)])
    assert "09:30" in slots


class TestEffectiveHours:
    def test_no_override_keeps_business_hours(self):
        business = default_hours()
        assert effective_hours(business, None) == business

    def test_override_replaces_that_weekday_only(self):
        merged = effective_hours(default_hours(), {"mon": {"open": "12:00", "close": "14:00"}})
        assert merged["mon"].open == "12:00"
        assert merged["tue"].open == "09:00"
        assert generate_slots(merged, MONDAY) == ["12:00", "12:30", "13:00", "13:30"]

    def test_override_can_close_a_day(self):
        merged = effective_hours(default_hours(), {"mon": {"closed": True}})
        assert generate_slots(merged, MONDAY) == []

    def test_malformed_override_closes_that_day(self):
        merged = effective_hours(default_hours(), {"mon": {"open": "25:00", "close": "26:00"}})
        assert merged["mon"].closed is True
        assert merged["tue"].closed is False
