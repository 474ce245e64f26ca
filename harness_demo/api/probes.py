# ================================
# FILE: harness_demo/api/probes.py
# ================================

from fastapi import APIRouter, Depends, Response, status

from harness_demo.api.dependencies import get_readiness
from harness_demo.status import ProbeState, ReadinessModel

router = APIRouter(tags=["Health"])


def _probe_response(status_code: int, probe_status: str) -> Response:
    # Pre-rendered body so every probe answers byte-exact compact JSON
    return Response(
        content=f'{{"status":"{probe_status}"}}',
        status_code=status_code,
        media_type="application/json",
    )


@router.get("/health")
@router.get("/healthz")
async def health():
    """Process is up. Never reflects readiness."""
    return _probe_response(status.HTTP_200_OK, "healthy")


@router.get("/live")
@router.get("/livez")
async def live():
    return _probe_response(status.HTTP_200_OK, "alive")


@router.get("/ready")
@router.get("/readyz")
async def ready(readiness: ReadinessModel = Depends(get_readiness)):
    """503 while warming up, 200 once the warm-up period has elapsed."""
    if readiness.state() is ProbeState.WARMING:
        return _probe_response(status.HTTP_503_SERVICE_UNAVAILABLE, ProbeState.WARMING.value)
    return _probe_response(status.HTTP_200_OK, ProbeState.READY.value)
