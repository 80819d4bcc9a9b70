"""Typed business settings: weekday operating hours and notification toggles.

Two entry points:
- API input goes through normal pydantic validation and is rejected (422)
  when a clock time is malformed or a day closes before it opens.
- Stored blobs go through `BusinessSettings.from_storage`, which never
  raises: a weekday that fails to parse is treated as closed.
"""

import logging
import re
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)

Weekday = Literal["mon", "tue", "wed", "thu", "fri", "sat", "sun"]
WEEKDAYS: tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

_CLOCK_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

DEFAULT_OPEN = "09:00"
DEFAULT_CLOSE = "19:00"


def clock_to_minutes(value: str) -> int:
    """Convert HH:MM (24h) to minutes since midnight. Raises ValueError if malformed."""
    match = _CLOCK_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid clock time '{value}', expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_clock(minutes: int) -> str:
    """Convert minutes since midnight to HH:MM string."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class DayHours(BaseModel):
    """Opening hours for one weekday."""
    open: str = DEFAULT_OPEN
    close: str = DEFAULT_CLOSE
    closed: bool = False

    @model_validator(mode="after")
    def _check_range(self) -> "DayHours":
        if self.closed:
            return self
        if clock_to_minutes(self.close) <= clock_to_minutes(self.open):
            raise ValueError(f"Closing time {self.close} must be after opening time {self.open}")
        return self

    @classmethod
    def closed_day(cls) -> "DayHours":
        return cls(closed=True)


class NotificationSettings(BaseModel):
    email_confirmation: bool = True
    email_reminders: bool = True
    sms_on_call: bool = True


def default_hours() -> dict[str, DayHours]:
    return {day: DayHours() for day in WEEKDAYS}


def parse_hours_table(raw: Any) -> dict[str, DayHours]:
    """Tolerant parse of a stored weekday → hours mapping.

    Missing or malformed weekdays come back closed.
    """
    if not isinstance(raw, dict):
        return {day: DayHours.closed_day() for day in WEEKDAYS}

    table: dict[str, DayHours] = {}
    for day in WEEKDAYS:
        entry = raw.get(day)
        if entry is None:
            table[day] = DayHours.closed_day()
            continue
        try:
            table[day] = DayHours.model_validate(entry)
        except ValidationError as e:
            logger.warning("Malformed hours for %s treated as closed: %s", day, e.errors()[0]["msg"])
            table[day] = DayHours.closed_day()
    return table


class BusinessSettings(BaseModel):
    """Structured replacement for the free-form settings blob."""
    hours: dict[Weekday, DayHours] = Field(default_factory=default_hours)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    @field_validator("hours")
    @classmethod
    def _fill_missing_days(cls, value: dict[str, DayHours]) -> dict[str, DayHours]:
        # An explicit table lists open days; anything omitted is closed
        return {day: value.get(day, DayHours.closed_day()) for day in WEEKDAYS}

    @classmethod
    def from_storage(cls, blob: Any) -> "BusinessSettings":
        """Build settings from a stored JSON blob without ever raising."""
        if not isinstance(blob, dict):
            return cls()

        raw_hours = blob.get("hours")
        hours = default_hours() if raw_hours is None else parse_hours_table(raw_hours)

        try:
            notifications = NotificationSettings.model_validate(blob.get("notifications") or {})
        except ValidationError:
            logger.warning("Malformed notification settings, using defaults")
            notifications = NotificationSettings()

        return cls.model_construct(hours=hours, notifications=notifications)

    def to_storage(self) -> dict:
        return self.model_dump(mode="json")
