"""
Upstream relay.

Forwards a GET to the upstream with a browser-like header set and reports
what came back as a `RelayResponse` variant instead of raising.

The upstream's bot detection keys on the presence of the full header set
below (User-Agent, Accept, Accept-Language, Referer, Origin,
X-Requested-With and the sec-ch-ua / Sec-Fetch-* family); dropping any of
them gets the challenge page back.

Usage:
    from tickerboard.services.relay import relay_fetch

    result = await relay_fetch("https://statusinvest.com.br/home/mainsearchquery?q=MXRF11")
    if result.ok:
        payload = result.data
"""

from __future__ import annotations

import asyncio
import json
from typing import Any
from urllib.parse import SplitResult, unquote, urlsplit

import httpx

from tickerboard.core.config import Settings, settings
from tickerboard.core.logging import get_logger
from tickerboard.domain.relay import (
    NetworkFailure,
    RelayRejected,
    RelayResponse,
    RelaySuccess,
    UpstreamBlocked,
    UpstreamHttpError,
    UpstreamMalformed,
)

logger = get_logger("services.relay")

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

_HTML_SIGNATURES = ("<!", "<html")


def build_browser_headers(origin: str) -> dict[str, str]:
    """Header set of a same-origin XHR from Chrome on Windows."""
    return {
        "User-Agent": USER_AGENT,
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "pt-BR,pt;q=0.9",
        "Accept-Encoding": "gzip, deflate, br",
        "Referer": f"{origin}/",
        "Origin": origin,
        "X-Requested-With": "XMLHttpRequest",
        "sec-ch-ua": '"Chromium";v="124", "Google Chrome";v="124", "Not-A.Brand";v="99"',
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "Sec-Fetch-Dest": "empty",
        "Sec-Fetch-Mode": "cors",
        "Sec-Fetch-Site": "same-origin",
        "Cache-Control": "no-cache",
    }


def _parse_absolute(candidate: str) -> SplitResult | None:
    try:
        parsed = urlsplit(candidate)
        parsed.port  # raises on a non-numeric port
    except ValueError:
        return None
    if parsed.scheme.lower() not in ("http", "https") or not parsed.hostname:
        return None
    return parsed


def host_allowed(hostname: str, allowed_domain: str) -> bool:
    """Hostname is the registered domain itself or one of its subdomains."""
    host = hostname.lower().rstrip(".")
    return host == allowed_domain or host.endswith(f".{allowed_domain}")


def resolve_target_url(
    raw: str | None, allowed_domain: str
) -> str | RelayRejected:
    """
    Validate a relay target against the allow-list.

    Accepts the URL either already decoded (as frameworks hand over query
    parameters) or still percent-encoded. A URL that parses as absolute is
    used verbatim; only one that does not is decoded, and only once, so
    encoded characters inside a decoded URL survive.

    Returns:
        The URL to fetch, or `RelayRejected` when it must not be fetched.
    """
    if raw is None or not raw.strip():
        return RelayRejected('Query parameter "url" is required.', malformed_url=True)

    candidate = raw.strip()
    parsed = _parse_absolute(candidate)
    if parsed is None and "%" in candidate:
        candidate = unquote(candidate)
        parsed = _parse_absolute(candidate)

    if parsed is None:
        return RelayRejected(f"Invalid URL: {raw}", malformed_url=True)

    if not host_allowed(parsed.hostname or "", allowed_domain):
        return RelayRejected("Domain not allowed.")

    return candidate


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_json(text: str) -> Any:
    """Strict JSON: NaN, Infinity and -Infinity are rejected."""
    return json.loads(text, parse_constant=_reject_constant)


def classify_upstream_body(
    status_code: int,
    content_type: str,
    text: str,
    preview_chars: int = 200,
) -> RelayResponse:
    """Decide what an upstream answer is, given its already-read body."""
    head = text.lstrip()[:5].lower()
    if (
        not 200 <= status_code < 300
        or "text/html" in content_type.lower()
        or head.startswith(_HTML_SIGNATURES)
    ):
        return UpstreamBlocked(http_status=status_code, preview=text[:preview_chars])

    try:
        data = parse_json(text)
    except ValueError:
        return UpstreamMalformed(preview=text[:preview_chars])

    return RelaySuccess(data)


async def _get(
    client: httpx.AsyncClient, url: str, config: Settings, **kwargs: Any
) -> httpx.Response:
    return await asyncio.wait_for(
        client.get(url, follow_redirects=True, **kwargs),
        timeout=config.relay_timeout,
    )


async def relay_fetch(
    target_url: str | None,
    *,
    client: httpx.AsyncClient | None = None,
    config: Settings | None = None,
) -> RelayResponse:
    """
    Fetch one upstream URL the way a browser would.

    The allow-list check happens before anything touches the network.
    No retries; a caller that wants them wraps this.

    Args:
        target_url: Absolute upstream URL, decoded or percent-encoded
        client: Shared client; a short-lived one is created when omitted
        config: Settings override (defaults to the process settings)
    """
    config = config or settings

    target = resolve_target_url(target_url, config.allowed_domain)
    if isinstance(target, RelayRejected):
        logger.warning(f"Relay rejected target: {target.reason}")
        return target

    headers = build_browser_headers(config.upstream_base_url)
    logger.info(f"Fetching {target}")

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=config.relay_timeout) as own_client:
                response = await _get(own_client, target, config, headers=headers)
        else:
            response = await _get(client, target, config, headers=headers)
    except (asyncio.TimeoutError, httpx.TimeoutException):
        logger.warning(f"Timeout after {config.relay_timeout:g}s fetching {target}")
        return NetworkFailure(f"Timed out after {config.relay_timeout:g}s")
    except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
        logger.error(f"Network error fetching {target}: {e}")
        return NetworkFailure(str(e) or type(e).__name__)

    content_type = response.headers.get("content-type", "")
    logger.info(f"Response status {response.status_code} | Content-Type: {content_type}")

    # Body is read exactly once
    text = response.text
    result = classify_upstream_body(
        response.status_code, content_type, text, config.preview_chars
    )

    if isinstance(result, UpstreamBlocked):
        logger.error(
            f"Got HTML instead of JSON (status {response.status_code}). "
            f"First {config.log_preview_chars} chars: {text[:config.log_preview_chars]}"
        )
    elif isinstance(result, UpstreamMalformed):
        logger.error(
            f"Invalid JSON from upstream. "
            f"First {config.log_preview_chars} chars: {text[:config.log_preview_chars]}"
        )

    return result


class RelayClient:
    """
    Client for a deployed relay (`GET {base}/relay?url=`).

    Maps the relay's status codes back to `RelayResponse` variants so the
    pipeline sees the same results whether it relays in-process or remotely.
    """

    def __init__(
        self,
        relay_base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        config: Settings | None = None,
    ):
        self.relay_base_url = relay_base_url.rstrip("/")
        self._client = client
        self._config = config or settings

    @property
    def endpoint(self) -> str:
        return f"{self.relay_base_url}/relay"

    async def fetch(self, target_url: str) -> RelayResponse:
        params = {"url": target_url}
        try:
            if self._client is None:
                async with httpx.AsyncClient(timeout=self._config.relay_timeout) as client:
                    response = await _get(client, self.endpoint, self._config, params=params)
            else:
                response = await _get(self._client, self.endpoint, self._config, params=params)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning(f"Timeout after {self._config.relay_timeout:g}s via relay for {target_url}")
            return NetworkFailure(f"Timed out after {self._config.relay_timeout:g}s")
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
            logger.error(f"Relay unreachable for {target_url}: {e}")
            return NetworkFailure(str(e) or type(e).__name__)

        return self._to_result(response)

    def _to_result(self, response: httpx.Response) -> RelayResponse:
        status = response.status_code
        text = response.text
        try:
            body = parse_json(text)
        except ValueError:
            body = None

        if status == 200:
            if body is None and text.strip() != "null":
                return UpstreamMalformed(preview=text[: self._config.preview_chars])
            return RelaySuccess(body)

        detail = body if isinstance(body, dict) else {}
        message = str(detail.get("error") or f"Relay returned {status}")

        if status in (400, 403):
            return RelayRejected(message, malformed_url=status == 400)
        if status == 503:
            return UpstreamBlocked(
                http_status=int(detail.get("httpStatus") or status),
                preview=str(detail.get("preview") or text[: self._config.preview_chars]),
            )
        if status == 502 and "preview" in detail:
            return UpstreamMalformed(preview=str(detail["preview"]))
        if status == 500:
            return NetworkFailure(str(detail.get("details") or message))

        return UpstreamHttpError(http_status=int(detail.get("httpStatus") or status))
