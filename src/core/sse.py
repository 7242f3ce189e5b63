"""Server-sent events connection manager - tracks subscribers and fans out events."""

import asyncio
import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def format_event(event: str, data: Any) -> str:
    """Render one event in the text/event-stream wire format."""
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"


HEARTBEAT = ": heartbeat\n\n"


class SseConnection:
    """One subscriber stream for a content type."""

    def __init__(self, content_type: str, where: str | None = None, queue_size: int = 100):
        self.content_type = content_type
        self.where = where
        self.queue: asyncio.Queue[str] = asyncio.Queue(maxsize=queue_size)
        self.is_connected = True

    def send(self, event: str, data: Any) -> None:
        """Queue an event for the stream; raises asyncio.QueueFull for slow consumers."""
        if not self.is_connected:
            raise ConnectionError("connection closed")
        self.queue.put_nowait(format_event(event, data))


class SseConnectionManager:
    """Manages live-update subscriptions keyed by content type."""

    def __init__(self):
        # Mapping: content_type -> list of subscriber connections
        self.active_connections: dict[str, list[SseConnection]] = {}

    def add_connection(self, connection: SseConnection) -> None:
        """Track a connection under its content type."""
        self.active_connections.setdefault(connection.content_type, []).append(connection)
        logger.info("SSE subscriber added for %s", connection.content_type)

    def remove_connection(self, connection: SseConnection) -> None:
        """Mark a connection disconnected; it is dropped on the next cleanup."""
        connection.is_connected = False
        logger.debug("SSE subscriber for %s marked disconnected", connection.content_type)

    def get_connections(self, content_type: str) -> list[SseConnection]:
        """Connected subscribers of a content type."""
        return [
            c for c in self.active_connections.get(content_type, []) if c.is_connected
        ]

    def get_all_content_types(self) -> list[str]:
        return list(self.active_connections)

    def cleanup_disconnected(self) -> None:
        """Drop disconnected connections and content types left without any."""
        for content_type in list(self.active_connections):
            alive = [c for c in self.active_connections[content_type] if c.is_connected]
            if alive:
                self.active_connections[content_type] = alive
            else:
                del self.active_connections[content_type]

    def send(self, connection: SseConnection, event: str, data: Any) -> bool:
        """Queue an event on one connection; False once the connection is dropped."""
        try:
            connection.send(event, data)
        except (asyncio.QueueFull, ConnectionError):
            # Slow or closed consumer
            self.remove_connection(connection)
            return False
        return True
