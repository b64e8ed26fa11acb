"""FastAPI application factory — entry point for the book review backend."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookreview import __version__
from bookreview.api.errors import register_exception_handlers
from bookreview.api.routes.recommendations import router as recommendations_router
from bookreview.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log the effective configuration on startup and note shutdown."""
    logger.info("Book review backend starting up...")
    logger.info("Database: %s", settings.database_url.split("@")[-1])
    logger.info("AI provider: %s (enabled=%s)", settings.ai_provider.value, settings.ai_enabled)
    logger.info("AI timeout: %.1fs", settings.ai_timeout_seconds)
    yield
    logger.info("Book review backend shutting down...")


def create_app() -> FastAPI:
    """Wire middleware and routes into the recommendation API."""
    application = FastAPI(
        title="Book Review",
        description="Book review platform with multi-strategy recommendations",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware ──────────────────────────────────
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Errors ─────────────────────────────────────
    register_exception_handlers(application)

    # ── Routes ─────────────────────────────────────
    application.include_router(recommendations_router)

    # ── Health Check ───────────────────────────────
    @application.get("/health", tags=["System"])
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "bookreview"}

    return application


app = create_app()
