"""WebSocket endpoint for realtime household updates."""

import asyncio
import logging
from typing import Annotated

import redis
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from homestock.api.dependencies import user_from_token
from homestock.config import get_settings
from homestock.database import get_db
from homestock.exceptions import NotFound
from homestock.services.households import HouseholdService
from homestock.services.realtime import ChangeTable, RealtimeService, Subscription

logger = logging.getLogger(__name__)
settings = get_settings()
router = APIRouter(prefix="/api/v1/ws", tags=["websocket"])

CLOSE_INVALID_TOKEN = 4001
CLOSE_ACCESS_DENIED = 4003
CLOSE_BAD_REQUEST = 4000
CLOSE_RESYNC = 4009
CLOSE_UNAVAILABLE = 1011


def parse_tables(raw: str | None) -> set[str] | None:
    """Comma separated table filter; None means every table."""
    if not raw:
        return None
    tables = {name.strip() for name in raw.split(",") if name.strip()}
    unknown = tables - {str(t) for t in ChangeTable}
    if unknown:
        raise ValueError(f"Unknown tables: {', '.join(sorted(unknown))}")
    return tables or None


@router.websocket("/households/{household_id}")
async def household_feed(
    websocket: WebSocket,
    household_id: int,
    db: Annotated[Session, Depends(get_db)],
    token: str = Query(...),
    tables: str | None = Query(None),
) -> None:
    """Push change events for one household.

    Authentication via token query parameter (WebSocket doesn't support headers).
    Events are not replayed: after ``resync_required`` or any reconnect the
    client refetches what it displays.
    """
    user = user_from_token(db, token)
    if user is None:
        await websocket.close(code=CLOSE_INVALID_TOKEN, reason="Invalid token")
        return

    try:
        HouseholdService(db).resolve_actor(user.id, household_id)
    except NotFound:
        await websocket.close(code=CLOSE_ACCESS_DENIED, reason="Access denied")
        return

    try:
        watched = parse_tables(tables)
    except ValueError as e:
        await websocket.close(code=CLOSE_BAD_REQUEST, reason=str(e))
        return

    realtime: RealtimeService = websocket.app.state.realtime
    try:
        subscription = await realtime.subscribe(household_id, watched)
    except (redis.RedisError, OSError) as e:
        logger.error(f"Realtime unavailable for household {household_id}: {e}")
        await websocket.close(code=CLOSE_UNAVAILABLE, reason="Realtime unavailable")
        return

    await websocket.accept()
    logger.info(f"WebSocket connected: user={user.id}, household={household_id}")

    tasks = [
        asyncio.create_task(_forward(websocket, subscription)),
        asyncio.create_task(_ping(websocket)),
        asyncio.create_task(_receive(websocket)),
    ]
    try:
        await websocket.send_json(
            {
                "type": "subscribed",
                "household_id": household_id,
                "tables": sorted(watched) if watched else [str(t) for t in ChangeTable],
            }
        )
        await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    except WebSocketDisconnect:
        pass
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        await realtime.unsubscribe(subscription)
        logger.info(f"WebSocket disconnected: user={user.id}, household={household_id}")


async def _forward(websocket: WebSocket, subscription: Subscription) -> None:
    """Relay queued change events until the subscription ends."""
    async for message in subscription.messages():
        await websocket.send_json(message)

    if subscription.stale:
        await websocket.send_json(
            {"type": "resync_required", "household_id": subscription.household_id}
        )
        await websocket.close(code=CLOSE_RESYNC, reason="Resync required")


async def _ping(websocket: WebSocket) -> None:
    """Send periodic pings to keep connection alive."""
    while True:
        await asyncio.sleep(settings.realtime_ping_interval)
        await websocket.send_json({"type": "ping"})


async def _receive(websocket: WebSocket) -> None:
    """Drain client messages (pong responses) until it disconnects."""
    while True:
        data = await websocket.receive_json()
        if data.get("type") == "pong":
            continue
