"""
FastAPI Application Entry Point for pokertable.

This module creates and configures the FastAPI application with:
- HTTP routes for single-table play
- WebSocket endpoint for real-time multi-room play
- CORS middleware for development
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pokertable import __version__
from pokertable.server.routes import router
from pokertable.server.websocket import game_manager, websocket_endpoint

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="pokertable",
        description="Texas Hold'em round engine with automated seats",
        version=__version__,
    )

    # CORS middleware for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include HTTP routes
    app.include_router(router)

    # WebSocket endpoint
    app.websocket("/ws")(websocket_endpoint)

    @app.on_event("startup")
    async def startup_event():
        policy = "remote model" if game_manager.config.has_remote_policy else "local heuristic"
        logger.info(f"pokertable server starting up (automated seats: {policy})")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("pokertable server shutting down...")

    return app


# Create the application instance
app = create_app()
