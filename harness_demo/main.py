# ================================
# FILE: harness_demo/main.py
# ================================
import logging
from contextlib import asynccontextmanager
from functools import partial
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.types import ASGIApp

from harness_demo.api.probes import router as probes_router
from harness_demo.api.routes import router as pages_router
from harness_demo.core.config import Settings, settings as default_settings
from harness_demo.core.exception_handlers import register_exception_handlers
from harness_demo.core.exceptions import ConfigurationError
from harness_demo.middleware.chain import chain
from harness_demo.middleware.logging_middleware import RequestLoggingMiddleware
from harness_demo.middleware.security_headers import SecurityHeadersMiddleware
from harness_demo.status import ReadinessModel

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    cfg: Settings = app.state.settings
    logger.info(
        "startup complete",
        extra={"version": cfg.version, "commit": cfg.commit, "ready_after": cfg.ready_after},
    )
    try:
        yield
    finally:
        readiness = app.state.readiness
        logger.info(
            "shutdown complete",
            extra={"uptime": readiness.uptime(), "uptime_seconds": round(readiness.service_uptime, 3)},
        )


def _check_static_dir(settings: Settings) -> None:
    static_dir = settings.static_dir
    if not static_dir.is_dir():
        raise ConfigurationError(
            f"Static directory not found: {static_dir}", details={"static_dir": str(static_dir)}
        )
    if not settings.index_path.is_file():
        raise ConfigurationError(
            f"Landing page not found: {settings.index_path}", details={"index": str(settings.index_path)}
        )


def create_app(
    settings: Optional[Settings] = None,
    readiness: Optional[ReadinessModel] = None,
) -> FastAPI:
    """
    Build the FastAPI application without the middleware chain.

    Raises ConfigurationError when the static assets are missing; nothing should
    be served in that case.
    """
    settings = settings or default_settings
    _check_static_dir(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Health", "description": "Liveness, readiness and health probes"},
            {"name": "Info", "description": "Application metadata"},
            {"name": "Pages", "description": "Landing page"},
        ],
    )
    app.state.settings = settings
    app.state.readiness = readiness or ReadinessModel(ready_after=settings.ready_after)

    register_exception_handlers(app)

    app.include_router(pages_router)
    app.include_router(probes_router)

    app.mount("/static", StaticFiles(directory=str(settings.static_dir)), name="static")

    return app


def create_application(
    settings: Optional[Settings] = None,
    readiness: Optional[ReadinessModel] = None,
    logger: Optional[logging.Logger] = None,
) -> ASGIApp:
    """Build the app and wrap it: security headers outermost, then request logging."""
    return chain(
        create_app(settings, readiness),
        SecurityHeadersMiddleware,
        partial(RequestLoggingMiddleware, logger=logger),
    )


# ASGI entry point for uvicorn ("harness_demo.main:app")
app = create_application()
