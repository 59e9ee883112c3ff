"""
FastAPI application entry point for the InsightEdge API.

This module configures logging and CORS, registers the API routers, and
starts the ASGI server when executed directly.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from insightedge import __version__
from insightedge.api import api_router
from insightedge.core.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for startup and shutdown logging.

    Settings are loaded at startup so configuration errors fail fast.
    """
    settings = get_settings()
    logger.info(
        f"InsightEdge API starting (synthetic fill "
        f"{'enabled' if settings.synthetic_fill_enabled else 'disabled'})"
    )
    yield
    logger.info("InsightEdge API shutting down")


# Create FastAPI application
app = FastAPI(
    title="InsightEdge API",
    version=__version__,
    description=(
        "Business-intelligence analysis engine. Provides endpoints for "
        "dataset analysis, statistical insights, natural-language queries "
        "and chart previews."
    ),
    lifespan=lifespan,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancer probes.

    Returns:
        Dict with status 'healthy'
    """
    return {"status": "healthy"}


@app.get("/")
async def root():
    """
    Root endpoint providing API information.

    Returns:
        Dict with API name and version
    """
    return {
        "name": "InsightEdge API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "insightedge.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
