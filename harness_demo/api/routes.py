# ================================
# FILE: harness_demo/api/routes.py
# ================================

import socket

from fastapi import APIRouter, Depends, Response
from fastapi.responses import HTMLResponse
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

from harness_demo.api.dependencies import get_readiness, get_settings
from harness_demo.core.config import Settings
from harness_demo.core.exceptions import NotFoundError
from harness_demo.models.schemas import AppInfo
from harness_demo.status import ReadinessModel

router = APIRouter()


def build_app_info(settings: Settings, readiness: ReadinessModel) -> AppInfo:
    """Fresh snapshot of the service metadata and current uptime"""
    return AppInfo(
        name=settings.app_name,
        version=settings.version,
        commit=settings.commit,
        environment=settings.environment,
        build_time=settings.build_time,
        uptime=readiness.uptime(),
        hostname=socket.gethostname(),
    )


@router.get("/", response_class=HTMLResponse, tags=["Pages"])
async def home(settings: Settings = Depends(get_settings)):
    """Serve the landing page"""
    try:
        html = settings.index_path.read_bytes()
    except OSError as exc:
        raise NotFoundError("Page not found", details={"file": str(settings.index_path)}) from exc
    return HTMLResponse(content=html)


@router.get("/api/info", tags=["Info"])
async def info(
    settings: Settings = Depends(get_settings),
    readiness: ReadinessModel = Depends(get_readiness),
):
    """Application info for the landing page"""
    app_info = build_app_info(settings, readiness)
    return app_info.model_dump(by_alias=True, exclude={"commit"})


@router.get("/version", tags=["Info"])
async def version(
    settings: Settings = Depends(get_settings),
    readiness: ReadinessModel = Depends(get_readiness),
):
    """Application info including the build commit"""
    return build_app_info(settings, readiness).model_dump(by_alias=True)


@router.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus exposition of the default registry"""
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
