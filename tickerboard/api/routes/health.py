"""Health check endpoints."""

from __future__ import annotations

from datetime import UTC, datetime
from urllib.parse import urlsplit

from fastapi import APIRouter

from tickerboard.core.config import settings
from tickerboard.schemas.common import HealthResponse
from tickerboard.services.relay import host_allowed


router = APIRouter(prefix="/health")


def upstream_configured() -> bool:
    """The configured upstream base URL passes the relay's own allow-list."""
    hostname = urlsplit(settings.upstream_base_url).hostname
    return bool(hostname) and host_allowed(hostname, settings.allowed_domain)


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the relay configuration. Does not call the upstream.",
)
async def health_check() -> HealthResponse:
    checks = {
        "upstream_configured": upstream_configured(),
        "remote_relay": settings.uses_remote_relay,
    }

    return HealthResponse(
        status="healthy" if checks["upstream_configured"] else "degraded",
        version=settings.app_version,
        timestamp=datetime.now(UTC),
        checks=checks,
    )


@router.get(
    "/live",
    summary="Liveness check",
    description="Check if the API process is alive.",
)
async def liveness_check() -> dict:
    """Simple check that the process is running."""
    return {"status": "alive"}
