"""Server-sent events endpoint for live content updates."""

import asyncio
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from motor.motor_asyncio import AsyncIOMotorDatabase

from src.core.config import settings
from src.core.database import get_database
from src.core.dependencies import SseManager
from src.core.sse import HEARTBEAT, SseConnection, SseConnectionManager, format_event
from src.modules.content.dependencies import require_permission
from src.modules.content.query_filters import apply_where_only
from src.modules.content.services import fetch_clean_content

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sse", tags=["live updates"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def event_stream(
    request: Request,
    manager: SseConnectionManager,
    connection: SseConnection,
    initial: list[dict],
    heartbeat_interval: float,
) -> AsyncIterator[str]:
    """Initial snapshot, then queued events with heartbeats during silence."""
    manager.add_connection(connection)
    try:
        yield format_event("initial", initial)
        while connection.is_connected:
            if await request.is_disconnected():
                break
            try:
                message = await asyncio.wait_for(
                    connection.queue.get(), timeout=heartbeat_interval
                )
            except asyncio.TimeoutError:
                yield HEARTBEAT
                continue
            yield message
    finally:
        manager.remove_connection(connection)
        logger.info("SSE subscriber for %s closed", connection.content_type)


@router.get("/{content_type}", dependencies=[Depends(require_permission("GET"))])
async def subscribe(
    content_type: str,
    request: Request,
    manager: SseManager,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> StreamingResponse:
    """Stream the current items of a type, then every new one."""
    where = request.query_params.get("where")
    items = await fetch_clean_content(db, content_type, populate=True)
    connection = SseConnection(content_type, where, queue_size=settings.SSE_QUEUE_SIZE)
    return StreamingResponse(
        event_stream(
            request,
            manager,
            connection,
            apply_where_only(items, where),
            settings.SSE_HEARTBEAT_INTERVAL_SECONDS,
        ),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
