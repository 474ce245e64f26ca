"""Middleware composition for ASGI applications."""

from __future__ import annotations

from typing import Callable

from starlette.types import ASGIApp

MiddlewareFactory = Callable[[ASGIApp], ASGIApp]


def chain(app: ASGIApp, *middleware: MiddlewareFactory) -> ASGIApp:
    """Wrap *app* in *middleware*, first entry outermost.

    ``chain(app, A, B)`` is ``A(B(app))``: ``A`` sees the request first and the
    response last.
    """

    for factory in reversed(middleware):
        app = factory(app)
    return app


__all__ = ["MiddlewareFactory", "chain"]
