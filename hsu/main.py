"""HSU FastAPI application entry point.

Builds the signing configuration, the session backend and the demo routes
from :class:`~hsu.config.Settings`.  Run with::

    HSU_SECRET=... uvicorn hsu.main:create_app --factory

A missing ``HSU_SECRET`` aborts start-up with
:class:`~hsu.utils.errors.ConfigurationError`.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from hsu import __version__
from hsu.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from hsu.api.routes import router as api_router
from hsu.api.session import ServerSessionMiddleware
from hsu.config.loader import load_settings
from hsu.config.settings import Settings
from hsu.interfaces.session_backend import ISessionBackend
from hsu.pipeline.scope import Hsu
from hsu.providers.session.memory_backend import MemorySessionBackend
from hsu.providers.session.sqlite_backend import SQLiteSessionBackend
from hsu.utils.logging import configure_logging, get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


def _build_session_backend(app_settings: Settings) -> ISessionBackend:
    """Select the session backend named by ``SESSION_BACKEND``."""
    if app_settings.session_backend == "sqlite":
        return SQLiteSessionBackend(
            db_path=app_settings.session_db_path,
            max_age_hours=app_settings.session_max_age_hours,
        )
    return MemorySessionBackend(max_age_hours=app_settings.session_max_age_hours)


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build and configure the FastAPI application."""
    app_settings = app_settings or load_settings()
    configure_logging(
        log_level=app_settings.log_level,
        json_output=(app_settings.app_env == "production"),
    )

    hsu = Hsu(app_settings.to_hsu_config())
    session_backend = _build_session_backend(app_settings)

    @asynccontextmanager
    async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
        if isinstance(session_backend, SQLiteSessionBackend):
            session_backend.initialize()
        _logger.info(
            "app_startup",
            version=__version__,
            environment=app_settings.app_env,
            session_backend=session_backend.get_provider_name(),
            ttl_seconds=hsu.config.ttl_seconds,
        )
        yield
        _logger.info("app_shutdown")

    application = FastAPI(
        title="HSU API",
        version=__version__,
        description="One-time HMAC signed URLs bound to the visitor's session.",
        lifespan=_lifespan,
    )
    application.state.hsu = hsu
    application.state.session_backend = session_backend

    # Last added runs first: logging wraps error handling wraps sessions.
    application.add_middleware(
        ServerSessionMiddleware,
        backend=session_backend,
        cookie_name=app_settings.session_cookie_name,
        max_age=app_settings.session_max_age_hours * 3600,
        secure=app_settings.session_cookie_secure,
    )
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)

    application.include_router(api_router)

    return application


def run() -> None:
    """Serve the app with uvicorn using host/port from settings."""
    app_settings = load_settings()
    uvicorn.run(
        "hsu.main:create_app",
        factory=True,
        host=app_settings.app_host,
        port=app_settings.app_port,
        reload=(app_settings.app_env == "development"),
    )


if __name__ == "__main__":
    run()
