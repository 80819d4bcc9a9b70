"""Status transition rules shared by appointments and queue entries.

Each entity has a table mapping a status to the statuses it may move to.
Terminal statuses map to an empty set. Anything not in the table is
rejected with `InvalidTransition` before a write happens.
"""

import enum
from typing import Mapping

from app.models.appointment import AppointmentStatus


class InvalidTransition(ValueError):
    """Raised when a status change is not allowed by the transition table."""

    def __init__(self, entity: str, current: enum.Enum, target: enum.Enum):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot change {entity} status from '{current.value}' to '{target.value}'"
        )


TransitionTable = Mapping[enum.Enum, frozenset]


def can_transition(table: TransitionTable, current: enum.Enum, target: enum.Enum) -> bool:
    return target in table.get(current, frozenset())


def ensure_transition(table: TransitionTable, current: enum.Enum, target: enum.Enum, entity: str) -> None:
    if not can_transition(table, current, target):
        raise InvalidTransition(entity, current, target)


def is_terminal(table: TransitionTable, status: enum.Enum) -> bool:
    return not table.get(status)


# Monotonic: nothing goes back to pending/confirmed once service has started.
APPOINTMENT_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.IN_PROGRESS,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.NO_SHOW,
    }),
    AppointmentStatus.CONFIRMED: frozenset({
        AppointmentStatus.IN_PROGRESS,
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.NO_SHOW,
    }),
    AppointmentStatus.IN_PROGRESS: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.NO_SHOW: frozenset(),
}


def ensure_appointment_transition(current: AppointmentStatus, target: AppointmentStatus) -> None:
    ensure_transition(APPOINTMENT_TRANSITIONS, current, target, "appointment")
