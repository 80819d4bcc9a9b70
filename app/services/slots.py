"""Slot availability engine.

Turns a weekday hours table, a date and the start times already taken by
a staff member into the list of bookable `HH:MM` start times.

Candidates are every `granularity` minutes from opening (inclusive) while
the candidate starts before closing. Service duration is NOT taken into
account: a 90 minute service can be booked at 18:30 in a salon closing at
19:00, and can overlap a later booking for the same staff member. Only
exact start-time matches are excluded.
"""

import logging
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from app.schemas.settings import (
    WEEKDAYS,
    DayHours,
    clock_to_minutes,
    minutes_to_clock,
    parse_hours_table,
)

logger = logging.getLogger(__name__)

DEFAULT_GRANULARITY_MINUTES = 30


def weekday_key(target_date: date) -> str:
    return WEEKDAYS[target_date.weekday()]


def effective_hours(
    business_hours: Mapping[str, DayHours],
    staff_override: Optional[Mapping[str, Any]] = None,
) -> dict[str, DayHours]:
    """Business hours with the staff member's per-weekday overrides applied.

    Override entries are stored JSON; one that fails to parse closes that
    weekday for the staff member.
    """
    merged = dict(business_hours)
    if not staff_override:
        return merged

    parsed = parse_hours_table(staff_override)
    for day in WEEKDAYS:
        if day in staff_override:
            merged[day] = parsed[day]
    return merged


def generate_slots(
    hours: Mapping[str, DayHours],
    target_date: date,
    booked_starts: Iterable[datetime] = (),
    granularity_minutes: int = DEFAULT_GRANULARITY_MINUTES,
) -> list[str]:
    """Bookable start times for `target_date`, ascending.

    `booked_starts` are the start timestamps of the staff member's active
    (pending / confirmed / in_progress) appointments. Entries on other dates
    are ignored. A closed, missing or malformed weekday yields [].
    """
    if granularity_minutes <= 0:
        raise ValueError("granularity_minutes must be positive")

    day = hours.get(weekday_key(target_date))
    if day is None or day.closed:
        return []

    try:
        open_minutes = clock_to_minutes(day.open)
        close_minutes = clock_to_minutes(day.close)
    except ValueError:
        logger.warning("Malformed hours %s-%s on %s, treating as closed", day.open, day.close, target_date)
        return []

    taken = {
        start.strftime("%H:%M")
        for start in booked_starts
        if start.date() == target_date
    }

    slots = []
    current = open_minutes
    while current < close_minutes:
        slot = minutes_to_clock(current)
        if slot not in taken:
            slots.append(slot)
        current += granularity_minutes
    return slots
