"""Background poller that pushes newly created items to SSE subscribers."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from motor.motor_asyncio import AsyncIOMotorDatabase

from src.core.config import settings
from src.core.database import get_database
from src.core.models import utc_now
from src.core.sse import SseConnectionManager
from src.modules.content import store
from src.modules.content.query_filters import apply_where_only
from src.modules.content.services import build_clean_content

logger = logging.getLogger(__name__)


class LiveUpdatePoller:
    """Polls for items created since the last tick and fans them out."""

    def __init__(
        self,
        manager: SseConnectionManager,
        db_provider: Callable[[], AsyncIOMotorDatabase] = get_database,
        interval: float | None = None,
    ):
        self.manager = manager
        self.db_provider = db_provider
        self.interval = interval if interval is not None else settings.SSE_POLL_INTERVAL_SECONDS
        self.last_check: datetime = utc_now()
        self._poller_task: asyncio.Task | None = None

    async def start(self):
        """Start the polling loop as a background task."""
        self.last_check = utc_now()
        self._poller_task = asyncio.create_task(self._poll_loop())
        logger.info("Live update poller started (every %ss)", self.interval)

    async def _poll_loop(self):
        while True:
            try:
                await asyncio.sleep(self.interval)
                await self.poll_once()
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("Live update tick failed")

    async def poll_once(self) -> None:
        """One tick: deliver new items per subscribed content type."""
        tick_start = utc_now()
        db = self.db_provider()

        for content_type in self.manager.get_all_content_types():
            connections = self.manager.get_connections(content_type)
            if not connections:
                continue
            try:
                raw_items = await store.list_created_after(db, content_type, self.last_check)
                if not raw_items:
                    continue
                items = await build_clean_content(db, raw_items, content_type, populate=True)
                logger.debug("Pushing %d new %s items", len(items), content_type)
                for connection in connections:
                    self._deliver(connection, apply_where_only(items, connection.where))
            except Exception:
                logger.exception("Live update failed for %s", content_type)

        self.manager.cleanup_disconnected()
        self.last_check = tick_start

    def _deliver(self, connection, items: list[dict]) -> None:
        for item in items:
            if not self.manager.send(connection, "new", item):
                return

    async def stop(self):
        """Cancel the polling loop."""
        if self._poller_task:
            self._poller_task.cancel()
            try:
                await self._poller_task
            except asyncio.CancelledError:
                pass
            self._poller_task = None
