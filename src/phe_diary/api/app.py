"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from phe_diary.api.diary import router as diary_router
from phe_diary.api.errors import register_exception_handlers
from phe_diary.api.foods import community_router, own_food_router
from phe_diary.api.lab_values import router as lab_values_router
from phe_diary.api.settings import router as settings_router
from phe_diary.app_logging import configure_logging
from phe_diary.config import parse_allowed_origins
from phe_diary.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to release Firebase resources")

    app = FastAPI(title="Phe Diary API", lifespan=lifespan)
    app.state.container = container

    allowed_origins = parse_allowed_origins(container.settings.cors_allowed_origins)
    if allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Authorization", "Content-Type"],
        )

    register_exception_handlers(app)
    app.include_router(diary_router)
    app.include_router(lab_values_router)
    app.include_router(own_food_router)
    app.include_router(community_router)
    app.include_router(settings_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
