"""FastAPI application for constgraph.

Serves settled layouts and SVG snapshots of the constant dependency
graph, computed from the analysis backend's data.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from constgraph.api.routes import router
from constgraph.backend import AnalysisClient
from constgraph.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan - startup and shutdown."""
    settings: Settings = app.state.settings

    # Startup
    logger.info("Starting constgraph API...")
    owns_client = app.state.client is None
    if owns_client:
        app.state.client = AnalysisClient.from_settings(settings)
    logger.info(f"Analysis backend: {app.state.client.base_url}")

    yield

    # Shutdown
    logger.info("Shutting down constgraph API...")
    if owns_client:
        await app.state.client.close()
        app.state.client = None


def create_app(settings: Settings | None = None, client: AnalysisClient | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="constgraph",
        description="Force-directed layouts of constant dependency graphs",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings or default_settings
    app.state.client = client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "constgraph.api.main:app",
        host=default_settings.api_host,
        port=default_settings.api_port,
        reload=default_settings.api_debug,
    )
