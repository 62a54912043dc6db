"""FastAPI application entry point for AppleVerse."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from appleverse import __version__
from appleverse.config import settings
from appleverse.database import close_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Ensure data directories exist
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.images_dir.mkdir(parents=True, exist_ok=True)

    await init_db()
    logger.info("Connected to MongoDB database %s", settings.mongodb_database)

    yield

    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="Apple cultivar catalogue",
    version=__version__,
    lifespan=lifespan,
)

# Only allow origins from the whitelist; empty list means same-origin only
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
        max_age=600,
    )


@app.get("/health", tags=["Health"])
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(
        content={
            "status": "healthy",
            "version": __version__,
            "app_name": settings.app_name,
        }
    )


# Import and include routers
from appleverse.routers import apples, dataset, export

app.include_router(apples.router, prefix="/api/apples", tags=["Apples"])
app.include_router(dataset.router, prefix="/api/dataset", tags=["Dataset"])
app.include_router(export.router, prefix="/api/export", tags=["Export"])

# Serve image files referenced by apple records - mounted after routes to avoid conflicts
app.mount("/images", StaticFiles(directory=str(settings.images_dir), check_dir=False), name="images")
app.mount("/data", StaticFiles(directory=str(settings.data_dir), check_dir=False), name="data")
