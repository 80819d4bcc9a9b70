"""Walk-in queue operations.

Database-bound side of the queue: ticket numbering, status changes and the
views the front desk and the public display read. The rules for which
status changes are legal live in `queue_state`.
"""

import logging
from datetime import datetime, time, timedelta
from typing import NamedTuple, Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.appointment import Appointment, AppointmentStatus
from app.models.business import Business
from app.models.queue_entry import QueueEntry, QueueStatus
from app.models.service import Service
from app.schemas.queue import (
    QueueJoin, QueueEntryOut, QueueTicketPublic, QueueBoard, QueueDisplay, DashboardStats,
)
from app.schemas.settings import BusinessSettings
from app.services.queue_state import (
    ACTIVE_QUEUE_STATUSES,
    ensure_queue_transition,
    estimate_wait_minutes,
    first_waiting,
    next_queue_number,
    plan_start_service,
)
from app.services.realtime import change_feed, QUEUE_ENTRIES
from app.services.sms import send_queue_called
from app.services.transitions import InvalidTransition
from app.utils.timeutils import business_today, local_day_bounds_utc

logger = logging.getLogger(__name__)


class QueueSnapshot(NamedTuple):
    entries: list[QueueEntry]
    now_serving: Optional[QueueEntry]
    upcoming: list[QueueEntry]


async def publish_entry(entry: QueueEntry, event: str) -> None:
    await change_feed.publish(
        QUEUE_ENTRIES,
        entry.business_id,
        event,
        QueueEntryOut.model_validate(entry).model_dump(mode="json"),
    )


def _today_filter(business: Business):
    start, end = local_day_bounds_utc(business.timezone)
    return (
        QueueEntry.business_id == business.id,
        QueueEntry.created_at >= start,
        QueueEntry.created_at < end,
    )


async def get_entry(db: AsyncSession, business_id: UUID, entry_id: UUID) -> QueueEntry:
    result = await db.execute(
        select(QueueEntry).where(QueueEntry.id == entry_id, QueueEntry.business_id == business_id)
    )
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Queue entry not found")
    return entry


# ============================================================================
# JOINING
# ============================================================================

async def join_queue(db: AsyncSession, business: Business, data: QueueJoin) -> QueueEntry:
    """Issue the next ticket of the day.

    Numbering reads the current maximum and adds one without a lock, so two
    customers joining at the same instant can receive the same number.
    """
    result = await db.execute(
        select(Service).where(Service.id == data.service_id, Service.business_id == business.id)
    )
    service = result.scalar_one_or_none()
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    if not service.is_active:
        raise HTTPException(status_code=400, detail="Service is no longer offered")

    today = _today_filter(business)
    current_max = (
        await db.execute(select(func.max(QueueEntry.queue_number)).where(*today))
    ).scalar()

    durations = (
        await db.execute(
            select(Service.duration_minutes)
            .join(QueueEntry, QueueEntry.service_id == Service.id)
            .where(*today, QueueEntry.status.in_(ACTIVE_QUEUE_STATUSES))
        )
    ).scalars().all()

    entry = QueueEntry(
        business_id=business.id,
        customer_name=data.customer_name,
        customer_phone=data.customer_phone,
        service_id=service.id,
        queue_number=next_queue_number(current_max),
        status=QueueStatus.WAITING,
        estimated_wait_minutes=estimate_wait_minutes(durations),
    )
    db.add(entry)
    await db.commit()
    await db.refresh(entry)

    logger.info("Queue ticket #%d issued for %s (%s)", entry.queue_number, business.slug, entry.id)
    await publish_entry(entry, "INSERT")
    return entry


# ============================================================================
# VIEWS
# ============================================================================

async def list_today(db: AsyncSession, business: Business) -> list[QueueEntry]:
    result = await db.execute(
        select(QueueEntry)
        .where(*_today_filter(business))
        .order_by(QueueEntry.queue_number, QueueEntry.created_at)
    )
    return list(result.scalars().all())


async def queue_snapshot(db: AsyncSession, business: Business) -> QueueSnapshot:
    """Today's tickets in number order, who is being served, and who is still to come."""
    entries = await list_today(db, business)
    now_serving = next((e for e in entries if e.status == QueueStatus.IN_PROGRESS), None)
    upcoming = [e for e in entries if e.status in (QueueStatus.WAITING, QueueStatus.CALLED)]
    return QueueSnapshot(entries, now_serving, upcoming)


async def queue_board(db: AsyncSession, business: Business) -> QueueBoard:
    snapshot = await queue_snapshot(db, business)
    waiting = first_waiting(snapshot.entries)
    return QueueBoard(
        now_serving=QueueEntryOut.model_validate(snapshot.now_serving) if snapshot.now_serving else None,
        next_waiting=QueueEntryOut.model_validate(waiting) if waiting else None,
        active=[QueueEntryOut.model_validate(e) for e in snapshot.entries if e.status in ACTIVE_QUEUE_STATUSES],
        finished=[
            QueueEntryOut.model_validate(e) for e in snapshot.entries if e.status not in ACTIVE_QUEUE_STATUSES
        ],
    )


async def queue_display(db: AsyncSession, business: Business) -> QueueDisplay:
    snapshot = await queue_snapshot(db, business)
    return QueueDisplay(
        business_name=business.name,
        now_serving=QueueTicketPublic.model_validate(snapshot.now_serving) if snapshot.now_serving else None,
        upcoming=[QueueTicketPublic.model_validate(e) for e in snapshot.upcoming],
    )


async def dashboard_stats(db: AsyncSession, business: Business) -> DashboardStats:
    snapshot = await queue_snapshot(db, business)

    today = business_today(business.timezone)
    day_start = datetime.combine(today, time.min)
    upcoming_appointments = (
        await db.execute(
            select(func.count(Appointment.id)).where(
                Appointment.business_id == business.id,
                Appointment.appointment_time >= day_start,
                Appointment.appointment_time < day_start + timedelta(days=1),
                Appointment.status.in_((AppointmentStatus.CONFIRMED, AppointmentStatus.PENDING)),
            )
        )
    ).scalar() or 0

    return DashboardStats(
        active_queue=sum(
            1 for e in snapshot.entries if e.status in (QueueStatus.WAITING, QueueStatus.IN_PROGRESS)
        ),
        completed_today=sum(1 for e in snapshot.entries if e.status == QueueStatus.COMPLETED),
        upcoming_appointments_today=upcoming_appointments,
        now_serving_number=snapshot.now_serving.queue_number if snapshot.now_serving else None,
    )


# ============================================================================
# STATUS CHANGES
# ============================================================================

async def _notify_called(db: AsyncSession, business: Business, entry: QueueEntry) -> None:
    """Text the customer that their ticket was called. Never raises."""
    business_settings = BusinessSettings.from_storage(business.settings)
    if not business_settings.notifications.sms_on_call:
        return

    sent = await send_queue_called(entry.customer_phone, business.name, entry.queue_number)
    if sent:
        entry.notified_at = datetime.utcnow()
        await db.commit()
        await db.refresh(entry)


async def _apply(db: AsyncSession, entry: QueueEntry, target: QueueStatus) -> QueueEntry:
    try:
        ensure_queue_transition(entry.status, target)
    except InvalidTransition as e:
        raise HTTPException(status_code=400, detail=str(e))

    entry.status = target
    await db.commit()
    await db.refresh(entry)
    logger.info("Queue ticket #%d (%s) → %s", entry.queue_number, entry.id, target.value)
    return entry


async def call_entry(db: AsyncSession, business: Business, entry_id: UUID) -> QueueEntry:
    entry = await get_entry(db, business.id, entry_id)
    entry = await _apply(db, entry, QueueStatus.CALLED)
    await _notify_called(db, business, entry)
    await publish_entry(entry, "UPDATE")
    return entry


async def call_next(db: AsyncSession, business: Business) -> QueueEntry:
    """Call the lowest-numbered waiting ticket of the day."""
    entry = first_waiting(await list_today(db, business))
    if entry is None:
        raise HTTPException(status_code=404, detail="No customers waiting")
    return await call_entry(db, business, entry.id)


async def start_service(db: AsyncSession, business: Business, entry_id: UUID) -> QueueEntry:
    """Put a ticket in the chair.

    Whoever is currently in progress for the business is sent back to
    `called`; both changes commit together.
    """
    target = await get_entry(db, business.id, entry_id)
    result = await db.execute(
        select(QueueEntry).where(
            QueueEntry.business_id == business.id,
            QueueEntry.status == QueueStatus.IN_PROGRESS,
            QueueEntry.id != target.id,
        )
    )
    entries = {e.id: e for e in result.scalars().all()}
    entries[target.id] = target

    try:
        changes = plan_start_service(entries.values(), target.id)
    except InvalidTransition as e:
        raise HTTPException(status_code=400, detail=str(e))

    for changed_id, new_status in changes:
        entries[changed_id].status = new_status
    await db.commit()

    changed = [entries[changed_id] for changed_id, _ in changes]
    for entry in changed:
        await db.refresh(entry)
    for entry in changed:
        await publish_entry(entry, "UPDATE")

    if len(changed) > 1:
        logger.info(
            "Queue ticket #%d started; %d ticket(s) moved back to called",
            target.queue_number, len(changed) - 1,
        )
    else:
        logger.info("Queue ticket #%d started", target.queue_number)
    return target


async def complete_entry(db: AsyncSession, business: Business, entry_id: UUID) -> QueueEntry:
    entry = await _apply(db, await get_entry(db, business.id, entry_id), QueueStatus.COMPLETED)
    await publish_entry(entry, "UPDATE")
    return entry


async def cancel_entry(db: AsyncSession, business: Business, entry_id: UUID) -> QueueEntry:
    entry = await _apply(db, await get_entry(db, business.id, entry_id), QueueStatus.CANCELLED)
    await publish_entry(entry, "UPDATE")
    return entry


async def transition_entry(
    db: AsyncSession,
    business: Business,
    entry_id: UUID,
    target: QueueStatus,
) -> QueueEntry:
    """Move a ticket to `target`, routing through the dedicated operation where one exists."""
    if target == QueueStatus.IN_PROGRESS:
        return await start_service(db, business, entry_id)
    if target == QueueStatus.CALLED:
        return await call_entry(db, business, entry_id)
    if target == QueueStatus.COMPLETED:
        return await complete_entry(db, business, entry_id)
    if target == QueueStatus.CANCELLED:
        return await cancel_entry(db, business, entry_id)

    entry = await get_entry(db, business.id, entry_id)
    # Nothing transitions back to waiting; this always raises 400
    entry = await _apply(db, entry, target)
    await publish_entry(entry, "UPDATE")
    return entry
