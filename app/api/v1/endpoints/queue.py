"""Front-desk queue endpoints."""

from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_business_scope, require_action
from app.core.permissions import Action
from app.models.business import Business
from app.models.user import User
from app.schemas.queue import QueueBoard, QueueEntryOut, QueueJoin, QueueStatusUpdate
from app.services import queue as queue_service

router = APIRouter()

manage_queue = require_action(Action.MANAGE_QUEUE)


@router.get("/", response_model=QueueBoard)
async def get_queue(
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(manage_queue),
):
    """Today's queue: who's in the chair, who's next, and everyone else."""
    return await queue_service.queue_board(db, business)


@router.post("/", response_model=QueueEntryOut, status_code=201)
async def add_walk_in(
    data: QueueJoin,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(manage_queue),
):
    return await queue_service.join_queue(db, business, data)


@router.post("/call-next", response_model=QueueEntryOut)
async def call_next(
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(manage_queue),
):
    return await queue_service.call_next(db, business)


@router.post("/{entry_id}/call", response_model=QueueEntryOut)
async def call_entry(
    entry_id: UUID,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(manage_queue),
):
    return await queue_service.call_entry(db, business, entry_id)


@router.post("/{entry_id}/start", response_model=QueueEntryOut)
async def start_service(
    entry_id: UUID,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(manage_queue),
):
    return await queue_service.start_service(db, business, entry_id)


@router.post("/{entry_id}/complete", response_model=QueueEntryOut)
async def complete_entry(
    entry_id: UUID,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(manage_queue),
):
    return await queue_service.complete_entry(db, business, entry_id)


@router.post("/{entry_id}/cancel", response_model=QueueEntryOut)
async def cancel_entry(
    entry_id: UUID,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(manage_queue),
):
    return await queue_service.cancel_entry(db, business, entry_id)


@router.patch("/{entry_id}/status", response_model=QueueEntryOut)
async def update_status(
    entry_id: UUID,
    update: QueueStatusUpdate,
    db: AsyncSession = Depends(get_db),
    business: Business = Depends(get_business_scope),
    current_user: User = Depends(manage_queue),
):
    return await queue_service.transition_entry(db, business, entry_id, update.status)
