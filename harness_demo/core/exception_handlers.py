"""
Exception Handlers Module
Centralized exception handling for the FastAPI application
"""
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from harness_demo.core.exceptions import HarnessDemoException

logger = logging.getLogger(__name__)


async def harness_demo_exception_handler(
    request: Request,
    exc: HarnessDemoException
) -> JSONResponse:
    """Handle the service's own exceptions"""
    logger.warning(
        f"HarnessDemoException: {exc.message}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "details": exc.details
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.message,
            "status_code": exc.status_code,
            "path": request.url.path
        }
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Handle HTTP exceptions (unknown paths, wrong methods)"""
    logger.debug(
        f"HTTP Exception: {exc.status_code} - {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code,
            "path": request.url.path
        },
        headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle all other unhandled exceptions"""
    logger.error(
        f"Unhandled Exception: {exc}",
        extra={
            "path": request.url.path,
            "exception_type": type(exc).__name__
        },
        exc_info=exc
    )

    # Internal details stay in the logs
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "status_code": 500,
            "path": request.url.path
        }
    )


def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI app

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(HarnessDemoException, harness_demo_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.debug("Exception handlers registered")


__all__ = [
    'register_exception_handlers',
    'harness_demo_exception_handler',
    'http_exception_handler',
    'general_exception_handler'
]
