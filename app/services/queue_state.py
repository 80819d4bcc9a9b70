"""Walk-in queue state machine.

Pure rules, no database access:

    waiting → called → in_progress → completed
       │         │          │
       └─────────┴──────────┴──→ cancelled

`waiting` may also jump straight to `in_progress`. `completed` and
`cancelled` are terminal.

Starting service on one entry demotes whichever other entry is currently
`in_progress` to `called` first, so a business never has two customers
being served at once. That demotion is a system step, not a transition a
caller can request (the table has no `in_progress → called` edge).
"""

from typing import Iterable, Optional, Protocol
from uuid import UUID

from app.models.queue_entry import QueueStatus
from app.services.transitions import ensure_transition, can_transition

QUEUE_TRANSITIONS: dict[QueueStatus, frozenset[QueueStatus]] = {
    QueueStatus.WAITING: frozenset({QueueStatus.CALLED, QueueStatus.IN_PROGRESS, QueueStatus.CANCELLED}),
    QueueStatus.CALLED: frozenset({QueueStatus.IN_PROGRESS, QueueStatus.CANCELLED}),
    QueueStatus.IN_PROGRESS: frozenset({QueueStatus.COMPLETED, QueueStatus.CANCELLED}),
    QueueStatus.COMPLETED: frozenset(),
    QueueStatus.CANCELLED: frozenset(),
}

ACTIVE_QUEUE_STATUSES = (QueueStatus.WAITING, QueueStatus.CALLED, QueueStatus.IN_PROGRESS)


class QueueItem(Protocol):
    id: UUID
    status: QueueStatus
    queue_number: int


def ensure_queue_transition(current: QueueStatus, target: QueueStatus) -> None:
    ensure_transition(QUEUE_TRANSITIONS, current, target, "queue entry")


def can_queue_transition(current: QueueStatus, target: QueueStatus) -> bool:
    return can_transition(QUEUE_TRANSITIONS, current, target)


def next_queue_number(current_max: Optional[int]) -> int:
    """Next ticket number for the day: max + 1, starting at 1."""
    return (current_max or 0) + 1


def plan_start_service(entries: Iterable[QueueItem], target_id: UUID) -> list[tuple[UUID, QueueStatus]]:
    """Status changes needed to make `target_id` the one entry in progress.

    Returns demotions (other in-progress entries → called) followed by the
    promotion of the target. Raises InvalidTransition if the target may not
    start, and KeyError if it is not among `entries`.
    """
    entries = list(entries)
    target = next((e for e in entries if e.id == target_id), None)
    if target is None:
        raise KeyError(target_id)

    ensure_queue_transition(target.status, QueueStatus.IN_PROGRESS)

    changes = [
        (e.id, QueueStatus.CALLED)
        for e in entries
        if e.status == QueueStatus.IN_PROGRESS and e.id != target_id
    ]
    changes.append((target_id, QueueStatus.IN_PROGRESS))
    return changes


def first_waiting(entries: Iterable[QueueItem]) -> Optional[QueueItem]:
    """Lowest-numbered waiting entry, or None."""
    waiting = [e for e in entries if e.status == QueueStatus.WAITING]
    return min(waiting, key=lambda e: e.queue_number) if waiting else None


def estimate_wait_minutes(service_durations_ahead: Iterable[int]) -> int:
    """Rough wait: every active ticket ahead is served back to back."""
    return sum(d for d in service_durations_ahead if d and d > 0)
