"""
FastAPI application factory.

Creates and configures the FastAPI app with:
- CORS middleware for the recruiting front-end
- Lifespan startup/shutdown for component initialization
- Resume parsing routes
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import initialize_components
from api.routes.resumes import router as resumes_router

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CORS: origins allowed to call this API
# ---------------------------------------------------------------------------

ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize components on startup; clean up on shutdown."""
    logger.info("Starting up, initializing resume parsing components...")
    initialize_components()
    logger.info("Startup complete. API is ready.")
    yield
    logger.info("Shutting down.")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app(init_components: bool = True) -> FastAPI:
    """Create and return the configured FastAPI application.

    Tests pass ``init_components=False`` and override dependencies instead.
    """
    app = FastAPI(
        title="Resume Parsing API",
        description=(
            "Extracts text from uploaded resumes and structures it into "
            "candidate profiles with a hosted language model."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan if init_components else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(resumes_router)

    @app.get("/health", tags=["health"], summary="Health check")
    def health() -> dict:
        return {"status": "ok", "service": "resume-parser"}

    return app
