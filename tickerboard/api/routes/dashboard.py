"""Dashboard endpoint: the normalized snapshot for one ticker."""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends

from tickerboard.api.dependencies import get_http_client
from tickerboard.cache.http_cache import CacheableResponse
from tickerboard.core.config import settings
from tickerboard.core.logging import get_logger
from tickerboard.schemas.common import ErrorResponse
from tickerboard.schemas.dashboard import DashboardResponse
from tickerboard.services.dashboard import build_fetcher, fallback_notice, load_snapshot

logger = get_logger("api.dashboard")

router = APIRouter()


@router.get(
    "/dashboard/{ticker}",
    response_model=DashboardResponse,
    summary="Get dashboard snapshot",
    description=(
        "Classifies the ticker, fetches its six chart series in parallel and "
        "normalizes them. When the upstream gives nothing usable the snapshot "
        "is simulated and `notice` says so."
    ),
    responses={400: {"model": ErrorResponse, "description": "Blank ticker"}},
)
async def get_dashboard(
    ticker: str,
    client: httpx.AsyncClient | None = Depends(get_http_client),
) -> CacheableResponse:
    fetch = build_fetcher(client) if client is not None else None
    snapshot = await load_snapshot(ticker, fetch=fetch)

    body = DashboardResponse(snapshot=snapshot, notice=fallback_notice(snapshot))
    content = body.model_dump(mode="json")

    if snapshot.is_synthetic:
        logger.info(f"Serving simulated snapshot for {snapshot.ticker}")
        return CacheableResponse(content, no_store=True)

    return CacheableResponse(
        content,
        s_maxage=settings.relay_cache_max_age,
        stale_while_revalidate=settings.relay_stale_while_revalidate,
    )
