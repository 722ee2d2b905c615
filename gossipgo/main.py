"""GossipGo reference backend: application factory and lifespan.

Run with `uvicorn --factory gossipgo.main:create_app`.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gossipgo.auth.routes import router as auth_router
from gossipgo.chats.routes import router as chats_router
from gossipgo.config.cors import configure_cors
from gossipgo.config.logging_config import configure_logging
from gossipgo.config.settings import Settings, get_settings
from gossipgo.connections.routes import router as connections_router
from gossipgo.db.seed import seed_store
from gossipgo.db.store import InMemoryStore
from gossipgo.messages.routes import router as messages_router
from gossipgo.middleware.error_handler import register_error_handlers
from gossipgo.middleware.request_id import RequestIDMiddleware
from gossipgo.presence.channel import PresenceChannel
from gossipgo.presence.routes import router as events_router
from gossipgo.presence.tracker import PresenceTracker
from gossipgo.users.routes import router as users_router
from gossipgo.utils.envelope import ok

logger = logging.getLogger(__name__)

DESCRIPTION = (
    "Reference backend for the GossipGo chat client.\n\n"
    "## Features\n"
    "- Bearer JWT authentication (register, login, logout)\n"
    "- User directory with search and batch lookup\n"
    "- Connection requests: request, accept, decline, cancel\n"
    "- Direct and group chats with per-user archiving\n"
    "- Messages, plus a Server-Sent Events stream of messages and presence\n\n"
    "## Authentication\n"
    "All endpoints except `/health`, `/docs` and `/api/auth/register|login` require "
    "`Authorization: Bearer <token>`."
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    channel: PresenceChannel = app.state.channel
    tracker: PresenceTracker = app.state.tracker
    tracker.attach()
    await channel.start()
    logger.info("GossipGo API started")
    try:
        yield
    finally:
        await channel.stop()
        tracker.detach()
        logger.info("GossipGo API stopped")


def create_app(
    settings: Settings | None = None,
    store: InMemoryStore | None = None,
    channel: PresenceChannel | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    if store is None:
        store = InMemoryStore()
        if settings.SEED_SAMPLE_DATA:
            seed_store(store, bcrypt_rounds=settings.BCRYPT_ROUNDS)
    if channel is None:
        channel = PresenceChannel.from_settings(settings, store.users.keys())

    app = FastAPI(
        title="GossipGo API",
        description=DESCRIPTION,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Health", "description": "Health check endpoints"},
            {"name": "Auth", "description": "Authentication: register, login, logout"},
            {"name": "Users", "description": "User directory"},
            {"name": "Connections", "description": "Connection requests between users"},
            {"name": "Chats", "description": "Direct and group chats, archiving"},
            {"name": "Messages", "description": "List and send messages"},
            {"name": "Events", "description": "Server-Sent Events for messages and presence"},
        ],
    )
    app.state.store = store
    app.state.channel = channel
    app.state.tracker = PresenceTracker(channel)

    # --- Middleware ---
    app.add_middleware(RequestIDMiddleware)
    configure_cors(app, settings)

    # --- Error handlers ---
    register_error_handlers(app)

    # --- Routes ---
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(connections_router)
    app.include_router(chats_router)
    app.include_router(messages_router)
    app.include_router(events_router)

    @app.get("/health", tags=["Health"], summary="Health check", description="Returns OK if the service is running.")
    async def health_check():
        return ok({"status": "ok", "presence_connected": app.state.channel.is_connected})

    return app
