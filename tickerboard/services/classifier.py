"""
Ticker classification from the upstream search.

The search answers with a list of matches whose `url` field points at the
asset's page, e.g. `/fundos-imobiliarios/mxrf11`. The path segment tells
the asset category.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from tickerboard.core.config import settings
from tickerboard.core.logging import get_logger
from tickerboard.domain.relay import RelayResponse
from tickerboard.domain.ticker import AssetCategory
from tickerboard.services.endpoints import search_url

logger = get_logger("services.classifier")

Fetch = Callable[[str], Awaitable[RelayResponse]]

# Checked in order, first match wins
CATEGORY_MARKERS: tuple[tuple[str, AssetCategory], ...] = (
    ("fundos-imobiliarios", AssetCategory.REAL_ESTATE_FUND),
    ("fiagros", AssetCategory.AGRIBUSINESS),
    ("acoes", AssetCategory.EQUITY),
)


def category_from_search(payload: Any) -> AssetCategory:
    """Infer the category from the first search result; EQUITY when unsure."""
    if not isinstance(payload, list) or not payload:
        return AssetCategory.EQUITY

    first = payload[0]
    url = first.get("url") if isinstance(first, dict) else None
    if not isinstance(url, str):
        return AssetCategory.EQUITY

    for marker, category in CATEGORY_MARKERS:
        if marker in url:
            return category
    return AssetCategory.EQUITY


async def classify(
    ticker: str, fetch: Fetch, base_url: str | None = None
) -> AssetCategory:
    """
    Classify a ticker with one search call.

    Never raises: relay errors and unexpected failures degrade to EQUITY.
    """
    url = search_url(base_url or settings.upstream_base_url, ticker)
    try:
        result = await fetch(url)
        if not result.ok:
            logger.warning(
                f"Search for {ticker} returned {type(result).__name__}, defaulting to equity"
            )
            return AssetCategory.EQUITY
        category = category_from_search(result.data)
    except Exception as e:
        logger.warning(f"Search for {ticker} failed, defaulting to equity: {e}")
        return AssetCategory.EQUITY

    logger.debug(f"Classified {ticker} as {category.value}")
    return category
