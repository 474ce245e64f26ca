# ================================
# FILE: tests/conftest.py
# ================================

import pytest
from fastapi.testclient import TestClient

from harness_demo.core.config import Settings
from harness_demo.main import create_application
from harness_demo.status import ReadinessModel

FIXED_NOW = 1_000.0


def make_readiness(elapsed: float, ready_after: float) -> ReadinessModel:
    """Readiness model pinned to a frozen clock, `elapsed` seconds after start"""
    return ReadinessModel(
        ready_after=ready_after,
        start_time=FIXED_NOW - elapsed,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def settings():
    """Deterministic settings; nothing is read back from the process environment"""
    return Settings(
        app_name="Harness Demo App",
        version="vTest",
        commit="abc123",
        environment="test",
        build_time="2025-01-01T00:00:00Z",
    )


@pytest.fixture
def make_client(settings):
    """Factory for clients running the full middleware chain"""
    def _make(readiness=None, **kwargs):
        return TestClient(create_application(settings, readiness), **kwargs)
    return _make


@pytest.fixture
def client(make_client):
    """Client for a service that finished warming up"""
    return make_client(make_readiness(elapsed=5, ready_after=2))


@pytest.fixture
def warming_client(make_client):
    """Client for a service still inside its warm-up window"""
    return make_client(make_readiness(elapsed=0, ready_after=10))
