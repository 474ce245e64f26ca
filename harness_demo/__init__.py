"""Harness Demo App: landing page, app info and probe endpoints."""

__version__ = "1.0.0"
