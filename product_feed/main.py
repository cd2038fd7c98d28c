"""
FastAPI application entry point.
"""

import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from product_feed.api.router import router
from product_feed.config import get_settings
from product_feed.deps import close_catalog_client
from product_feed.schemas.common import HealthResponse


logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    # Startup
    yield
    # Shutdown
    await close_catalog_client()


app = FastAPI(
    title="Product Feed API",
    description="JSON and Google Merchant XML product feeds with region pricing and availability",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(router)


@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Health check endpoint."""
    return HealthResponse(ok=True)


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Product Feed API",
        "version": "1.0.0",
        "docs": "/docs"
    }
