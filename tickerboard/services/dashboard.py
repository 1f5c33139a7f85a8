"""
Dashboard data pipeline.

ticker -> classify -> six parallel fetches -> normalize, falling back to
synthetic data when the upstream gives nothing usable.

Usage:
    from tickerboard.services.dashboard import DashboardSession, load_snapshot

    snapshot = await load_snapshot("mxrf11")

    session = DashboardSession()
    snapshot = await session.query("PETR4")   # None if a newer query started meanwhile
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import httpx
from pydantic import ValidationError

from tickerboard.core.config import Settings, settings
from tickerboard.core.exceptions import AggregationFailedError, InvalidTickerError
from tickerboard.core.logging import get_logger
from tickerboard.domain.relay import RelayResponse
from tickerboard.domain.snapshot import FinancialSnapshot
from tickerboard.domain.ticker import TickerQuery
from tickerboard.services.aggregator import aggregate
from tickerboard.services.classifier import classify
from tickerboard.services.relay import RelayClient, relay_fetch
from tickerboard.services.synthetic import generate_synthetic

logger = get_logger("services.dashboard")

Fetch = Callable[[str], Awaitable[RelayResponse]]


def parse_ticker(raw: str | None) -> TickerQuery:
    """Normalize user input; blank input raises before anything is fetched."""
    try:
        return TickerQuery(symbol=raw if raw is not None else "")
    except ValidationError as e:
        raise InvalidTickerError() from e


def build_fetcher(client: httpx.AsyncClient, config: Settings | None = None) -> Fetch:
    """In-process relay, or the deployed one when `relay_base_url` is set."""
    config = config or settings
    if config.uses_remote_relay:
        return RelayClient(config.relay_base_url, client=client, config=config).fetch

    async def fetch(url: str) -> RelayResponse:
        return await relay_fetch(url, client=client, config=config)

    return fetch


async def _run_pipeline(ticker: str, fetch: Fetch, config: Settings) -> FinancialSnapshot:
    category = await classify(ticker, fetch, config.upstream_base_url)
    try:
        return await aggregate(ticker, category, fetch, config.upstream_base_url)
    except AggregationFailedError as e:
        logger.warning(f"Falling back to synthetic data for {ticker}: {e.message}")
        return generate_synthetic(ticker, reason=e.message)


async def load_snapshot(
    raw_ticker: str | None,
    *,
    fetch: Fetch | None = None,
    config: Settings | None = None,
) -> FinancialSnapshot:
    """
    Produce the snapshot for one ticker query.

    Args:
        raw_ticker: User input; trimmed and uppercased
        fetch: Relay callable override (one shared client is opened otherwise)
        config: Settings override

    Raises:
        InvalidTickerError: blank ticker
    """
    config = config or settings
    ticker = parse_ticker(raw_ticker).symbol

    if fetch is not None:
        return await _run_pipeline(ticker, fetch, config)

    async with httpx.AsyncClient(timeout=config.relay_timeout) as client:
        return await _run_pipeline(ticker, build_fetcher(client, config), config)


def fallback_notice(snapshot: FinancialSnapshot) -> str | None:
    """User-facing notice for synthetic snapshots; None for real data."""
    if not snapshot.is_synthetic:
        return None
    reason = snapshot.fallback_reason or "The upstream could not be reached."
    return (
        f"SIMULATED DATA for {snapshot.ticker}. {reason} "
        "The upstream blocked the request (CORS or bot protection), so the "
        "charts show structural placeholder figures, not real financials."
    )


class DashboardSession:
    """
    Holds the snapshot on display; the most recent query wins.

    Outstanding requests of a superseded query are not cancelled, but their
    result is discarded and never replaces `current`.
    """

    def __init__(self, *, fetch: Fetch | None = None, config: Settings | None = None):
        self._fetch = fetch
        self._config = config
        self._generation = 0
        self._in_flight = 0
        self.current: FinancialSnapshot | None = None

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    async def query(self, raw_ticker: str | None) -> FinancialSnapshot | None:
        """
        Run a query and publish its snapshot unless a newer one started.

        Returns:
            The published snapshot, or None when this query went stale
        """
        ticker = parse_ticker(raw_ticker).symbol

        self._generation += 1
        generation = self._generation
        self._in_flight += 1
        try:
            snapshot = await load_snapshot(ticker, fetch=self._fetch, config=self._config)
        except Exception:
            if generation != self._generation:
                logger.info(f"Discarding failed stale query for {ticker}")
                return None
            raise
        finally:
            self._in_flight -= 1

        if generation != self._generation:
            logger.info(f"Discarding stale result for {ticker}")
            return None

        self.current = snapshot
        return snapshot
