"""
Parallel fetch of the six per-ticker chart endpoints.

All six requests are started together and awaited together. A failing
endpoint leaves its slot as None; only when every slot is None or empty
is the whole aggregate treated as failed (the upstream blocks all of them
at once when its bot protection kicks in).
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sized
from typing import Any

from tickerboard.core.config import settings
from tickerboard.core.exceptions import AggregationFailedError
from tickerboard.core.logging import get_logger
from tickerboard.domain.relay import RelayResponse
from tickerboard.domain.snapshot import SERIES_FIELDS, FinancialSnapshot
from tickerboard.domain.ticker import AssetCategory
from tickerboard.services.endpoints import series_urls
from tickerboard.services.normalizer import normalize_earnings, normalize_series

logger = get_logger("services.aggregator")

Fetch = Callable[[str], Awaitable[RelayResponse]]


def is_empty_payload(payload: Any) -> bool:
    """None, an empty container, or a bare scalar with nothing to chart."""
    if payload is None:
        return True
    if isinstance(payload, Sized):
        return len(payload) == 0
    # Numbers and booleans carry no keys
    return True


async def _fetch_slot(slot: str, url: str, fetch: Fetch) -> Any:
    try:
        result = await fetch(url)
    except Exception as e:
        logger.warning(f"Slot {slot} raised, leaving it empty: {e}")
        return None

    if not result.ok:
        logger.warning(f"Slot {slot} failed with {type(result).__name__}")
        return None
    return result.data


async def fetch_slots(
    ticker: str,
    category: AssetCategory,
    fetch: Fetch,
    base_url: str | None = None,
) -> dict[str, Any]:
    """
    Fetch all six slots concurrently.

    Returns:
        Slot name -> parsed payload, or None for a failed slot
    """
    urls = series_urls(base_url or settings.upstream_base_url, category, ticker)
    payloads = await asyncio.gather(
        *(_fetch_slot(slot, url, fetch) for slot, url in urls.items())
    )
    return dict(zip(urls.keys(), payloads))


async def aggregate(
    ticker: str,
    category: AssetCategory,
    fetch: Fetch,
    base_url: str | None = None,
) -> FinancialSnapshot:
    """
    Fetch and normalize the real snapshot for a ticker.

    Partial data is kept: empty slots just give empty series.

    Raises:
        AggregationFailedError: every slot was None or empty
    """
    slots = await fetch_slots(ticker, category, fetch, base_url)

    if all(is_empty_payload(payload) for payload in slots.values()):
        logger.warning(f"All {len(slots)} endpoints empty for {ticker} ({category.value})")
        raise AggregationFailedError(
            details={"ticker": ticker, "category": category.value}
        )

    missing = [slot for slot, payload in slots.items() if payload is None]
    if missing:
        logger.info(f"Partial data for {ticker}: missing {', '.join(missing)}")

    return FinancialSnapshot(
        ticker=ticker,
        category=category,
        is_synthetic=False,
        earnings=normalize_earnings(slots["earnings"]),
        **{name: normalize_series(slots[name]) for name in SERIES_FIELDS},
    )
