# ================================
# FILE: harness_demo/api/dependencies.py
# ================================

from fastapi import Request

from harness_demo.core.config import Settings
from harness_demo.status import ReadinessModel


# Both objects are built once per app in create_app and kept on app.state
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_readiness(request: Request) -> ReadinessModel:
    return request.app.state.readiness
