"""Live change stream for queue displays and staff screens.

WS /api/v1/realtime/ws/{business_id}[?token=<jwt>]

With a staff token for the business the socket receives every
`queue_entries` and `appointments` change as-is. Without one it receives
queue changes only, trimmed to what the public display may show.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import async_session
from app.core.permissions import Action, Role, is_allowed
from app.models.business import Business
from app.models.user import User
from app.schemas.queue import QueueTicketPublic
from app.services.auth import decode_access_token
from app.services.realtime import change_feed, APPOINTMENTS, QUEUE_ENTRIES

router = APIRouter()
logger = logging.getLogger(__name__)

# Application-defined close code (4000-4999 range)
CLOSE_NOT_FOUND = 4404


async def _has_staff_access(db: AsyncSession, token: Optional[str], business_id: UUID) -> bool:
    if not token:
        return False
    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        return False
    try:
        user = await db.get(User, UUID(payload["sub"]))
    except ValueError:
        return False
    if not user or not user.is_active or not is_allowed(user.role, Action.VIEW_DASHBOARD):
        return False
    return user.role == Role.SUPER_ADMIN.value or user.business_id == business_id


def _public_message(message: dict) -> dict:
    record = message.get("record")
    if record:
        record = QueueTicketPublic.model_validate(record).model_dump(mode="json")
    return {**message, "record": record}


@router.websocket("/ws/{business_id}")
async def realtime_ws(websocket: WebSocket, business_id: UUID, token: Optional[str] = Query(None)):
    async with async_session() as db:
        business = await db.get(Business, business_id)
        full_access = business is not None and await _has_staff_access(db, token, business_id)

    if business is None:
        await websocket.close(code=CLOSE_NOT_FOUND)
        return

    await websocket.accept()

    async def forward(message: dict) -> None:
        await websocket.send_json(message)

    async def forward_public(message: dict) -> None:
        await websocket.send_json(_public_message(message))

    unsubscribes = [change_feed.subscribe(QUEUE_ENTRIES, business_id, forward if full_access else forward_public)]
    if full_access:
        unsubscribes.append(change_feed.subscribe(APPOINTMENTS, business_id, forward))

    logger.info("Realtime client connected to %s (staff=%s)", business_id, full_access)
    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        pass
    finally:
        for unsubscribe in unsubscribes:
            unsubscribe()
        logger.info("Realtime client disconnected from %s", business_id)
