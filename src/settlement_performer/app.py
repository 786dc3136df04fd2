"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from settlement_performer.config import get_settings
from settlement_performer.core.exceptions import register_exception_handlers
from settlement_performer.core.lifespan import lifespan
from settlement_performer.core.middleware import RequestValidationMiddleware
from settlement_performer.routers import health, tasks


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance with all routers registered.
    """
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.service.name} Service",
        version=settings.service.version,
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["Operations"])
    app.include_router(tasks.router, tags=["Tasks"])

    app.add_middleware(
        RequestValidationMiddleware,
        max_body_size=settings.request.max_body_size,
    )

    return app
