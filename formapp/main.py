"""formapp Server — FastAPI application entry point (long-running variant).

Invariants:
    - Routes registered explicitly; submissions under settings.api_prefix, /health unprefixed
    - Settings passed to create_app are kept on app.state and used by the lifespan
      and the health route
    - The database manager is created in the lifespan, stored on app.state,
      injected into routes via get_db_manager, and disposed on shutdown
    - CORS configured from settings (origins, methods, credentials)
    - Static files mounted AFTER API routes so /api/* and /health take precedence
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from formapp.api.error_handlers import register_error_handlers
from formapp.api.routes import health, submissions
from formapp.config import Settings, get_settings
from formapp.infrastructure.database import DatabaseSessionManager
from formapp.infrastructure.observability import (
    RequestLoggingMiddleware, setup_logging,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    app.state.db_manager = DatabaseSessionManager.from_settings(settings)
    if await app.state.db_manager.health_check():
        logger.info("Connected to database")
    else:
        # keep serving; /health reports 503 until the database comes back
        logger.error("Error connecting to database")
    logger.info(f"formapp server started (version {settings.app_version})")
    yield
    await app.state.db_manager.dispose()
    logger.info("formapp server shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    application = FastAPI(
        title="formapp API", version=settings.app_version, lifespan=lifespan,
    )
    application.state.settings = settings

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=settings.cors_method_list,
        allow_credentials=settings.cors_credentials,
        allow_headers=["*"],
    )
    if settings.enable_request_logging:
        application.add_middleware(RequestLoggingMiddleware)

    application.include_router(health.router)
    application.include_router(submissions.router, prefix=settings.api_prefix)
    register_error_handlers(application)

    if os.path.isdir(settings.static_dir):
        application.mount(
            "/", StaticFiles(directory=settings.static_dir, html=True),
            name="static",
        )
    return application


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "formapp.main:app", host=settings.host, port=settings.port,
        log_config=None,
    )
