"""
FastAPI dependency injection utilities.

Provides reusable dependencies for routes and services.
"""

from typing import Annotated

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from src.core.database import get_database
from src.core.sse import SseConnectionManager


def get_sse_manager(request: Request) -> SseConnectionManager:
    """Dependency for the process-wide live-update connection registry."""
    return request.app.state.sse_connections


# Type aliases for dependency injection
MongoDB = Annotated[AsyncIOMotorDatabase, Depends(get_database)]
SseManager = Annotated[SseConnectionManager, Depends(get_sse_manager)]
