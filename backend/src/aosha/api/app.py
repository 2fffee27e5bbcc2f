"""FastAPI application wrapped with the Socket.IO party server.

Run ``socket_app`` under uvicorn; it serves both the REST API and the
Socket.IO endpoint.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aosha import __version__
from aosha.api.routes.assets import router as assets_router
from aosha.api.routes.auth import router as auth_router
from aosha.api.routes.maps import router as maps_router
from aosha.config import settings
from aosha.db.connection import db_manager
from aosha.infra.storage.user_repository import UserRepository, load_seed_file
from aosha.logging_config import setup_logging

# Socket.IO server for real-time communication; importing map_events
# registers the map handlers on the same server
from aosha.connection import map_events  # noqa: F401
from aosha.connection.room_registry import room_registry
from aosha.connection.socketio_server import PARTY_ROOM, create_socketio_app

logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings.validate()
    await db_manager.create_tables()
    logger.info("[OK] Database ready (%s)", settings.database_url)

    if settings.seed_users_file:
        try:
            await UserRepository().seed_users(load_seed_file(settings.seed_users_file))
        except (OSError, ValueError) as e:
            logger.error("Could not seed users from %s: %s", settings.seed_users_file, e)
            raise

    logger.info("[OK] Party room '%s' open on namespace '%s'", PARTY_ROOM, settings.socketio_namespace)

    yield

    # Shutdown
    await db_manager.dispose()
    logger.info("[OK] API server shutdown complete")


app = FastAPI(title="Aosha Campaign API", version=__version__, lifespan=lifespan)

# Wrap FastAPI app with Socket.IO. Use socket_app for uvicorn.
socket_app = create_socketio_app(app)

app.include_router(auth_router)
app.include_router(assets_router)
app.include_router(maps_router)

origins = settings.cors_allowed_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if origins == "*" else origins,
    allow_credentials=origins != "*",
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint - no auth required for monitoring."""
    return {
        "status": "healthy",
        "service": "Aosha Campaign API",
        "party_members": room_registry.member_count(PARTY_ROOM),
    }
