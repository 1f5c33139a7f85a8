"""Relay endpoint: fetch an allowed upstream URL and return its JSON."""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, Query, Request, Response

from tickerboard.api.dependencies import get_http_client
from tickerboard.cache.http_cache import (
    CacheableResponse,
    NotModifiedResponse,
    cache_control,
    check_if_none_match,
    generate_etag,
)
from tickerboard.core.config import settings
from tickerboard.core.exceptions import (
    InvalidTargetError,
    RelayNetworkError,
    RelayRejectedError,
    UpstreamBlockedError,
    UpstreamMalformedError,
    UpstreamStatusError,
)
from tickerboard.core.logging import get_logger
from tickerboard.domain.relay import (
    NetworkFailure,
    RelayRejected,
    RelayResponse,
    UpstreamBlocked,
    UpstreamHttpError,
    UpstreamMalformed,
)
from tickerboard.schemas.common import ErrorResponse
from tickerboard.services.relay import relay_fetch

logger = get_logger("api.relay")

router = APIRouter()


def raise_for_result(result: RelayResponse) -> None:
    """Turn a failed relay result into the matching API error."""
    if isinstance(result, RelayRejected):
        if result.malformed_url:
            raise InvalidTargetError(result.reason)
        raise RelayRejectedError(result.reason)
    if isinstance(result, UpstreamBlocked):
        raise UpstreamBlockedError(result.http_status, result.preview)
    if isinstance(result, UpstreamMalformed):
        raise UpstreamMalformedError(result.preview)
    if isinstance(result, UpstreamHttpError):
        raise UpstreamStatusError(result.http_status)
    if isinstance(result, NetworkFailure):
        raise RelayNetworkError(details=result.message)


@router.get(
    "/relay",
    summary="Relay an upstream request",
    description=(
        "Fetches an absolute URL on the allowed upstream domain with browser "
        "headers and returns its JSON. Challenge pages and invalid JSON are "
        "reported as errors."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "url missing or unparseable"},
        403: {"model": ErrorResponse, "description": "Host not on the allow-list"},
        500: {"model": ErrorResponse, "description": "Network failure"},
        502: {"model": ErrorResponse, "description": "Upstream body is not JSON"},
        503: {"model": ErrorResponse, "description": "Bot-protection challenge detected"},
    },
)
async def relay(
    request: Request,
    url: str | None = Query(None, description="Absolute upstream URL"),
    client: httpx.AsyncClient | None = Depends(get_http_client),
) -> Response:
    # `url` arrives percent-decoded once by Starlette
    result = await relay_fetch(url, client=client)
    raise_for_result(result)

    etag = generate_etag(result.data)
    if check_if_none_match(request, etag):
        return NotModifiedResponse(
            etag=etag,
            headers={
                "Cache-Control": cache_control(
                    s_maxage=settings.relay_cache_max_age,
                    stale_while_revalidate=settings.relay_stale_while_revalidate,
                )
            },
        )

    return CacheableResponse(
        result.data,
        s_maxage=settings.relay_cache_max_age,
        stale_while_revalidate=settings.relay_stale_while_revalidate,
        etag=etag,
    )


@router.options("/relay", include_in_schema=False)
async def relay_options() -> Response:
    return Response(status_code=200)
