"""
Content REST API - FastAPI Application

Generic CRUD, reference population, query filters and live updates over a
content item store in MongoDB.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.core.config import settings
from src.core.database import close_db_connections, get_database, init_db_connections
from src.core.exceptions import AppException, app_exception_handler
from src.core.sse import SseConnectionManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown events."""
    # Startup
    await init_db_connections()

    from src.modules.auth.services import ensure_indexes as ensure_auth_indexes
    from src.modules.content.live_updates import LiveUpdatePoller
    from src.modules.content.store import ensure_indexes as ensure_content_indexes

    db = get_database()
    await ensure_auth_indexes(db)
    await ensure_content_indexes(db)

    poller = None
    if settings.LIVE_UPDATES_ENABLED:
        poller = LiveUpdatePoller(app.state.sse_connections)
        await poller.start()

    yield
    # Shutdown
    if poller:
        await poller.stop()
    await close_db_connections()


def create_app() -> FastAPI:
    """Application factory for creating FastAPI instance."""
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description="REST API over a content item store",
        version="0.1.0",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        swagger_ui_parameters={"persistAuthorization": True},
        lifespan=lifespan,
    )

    # Process-wide registry of live-update subscribers
    app.state.sse_connections = SseConnectionManager()

    app.add_exception_handler(AppException, app_exception_handler)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for container orchestration."""
        return {"status": "healthy", "app": settings.APP_NAME}

    # Register module routers; prefixed routers before the generic /api/{content_type}
    from src.modules.auth.router import router as auth_router
    from src.modules.content.router import expand_router, raw_router
    from src.modules.content.router import router as content_router
    from src.modules.content.sse_router import router as sse_router
    from src.modules.system.router import router as system_router

    app.include_router(auth_router)
    app.include_router(system_router)
    app.include_router(sse_router)
    app.include_router(expand_router)
    app.include_router(raw_router)
    app.include_router(content_router)

    return app


# Create application instance
app = create_app()
