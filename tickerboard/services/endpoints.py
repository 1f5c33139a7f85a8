"""Upstream endpoint templates."""

from __future__ import annotations

from urllib.parse import urlencode

from tickerboard.domain.ticker import AssetCategory

# Slot name -> (path under the category segment, query parameters);
# "{ticker}" in a parameter value is substituted per query.
SERIES_TEMPLATES: dict[str, tuple[str, dict[str, str]]] = {
    "net_worth": ("getpatrimonioliquido", {"code": "{ticker}", "type": "0"}),
    "revenue": ("getreceitas", {"code": "{ticker}", "type": "0"}),
    "expenses": ("getdespesas", {"code": "{ticker}", "type": "0"}),
    "cash": ("getcaixa", {"code": "{ticker}", "type": "0"}),
    "net_result": ("getresultado", {"code": "{ticker}", "type": "0"}),
    "earnings": (
        "companytickerprovents",
        {"companyName": "{ticker}", "chartProventsType": "1"},
    ),
}


def search_url(base_url: str, ticker: str) -> str:
    """Cross-category keyword search."""
    return f"{base_url}/home/mainsearchquery?{urlencode({'q': ticker})}"


def series_urls(base_url: str, category: AssetCategory, ticker: str) -> dict[str, str]:
    """The six data endpoints for one ticker, keyed by slot name."""
    urls = {}
    for slot, (path, params) in SERIES_TEMPLATES.items():
        query = urlencode({k: v.format(ticker=ticker) for k, v in params.items()})
        urls[slot] = f"{base_url}/{category.path_segment}/{path}?{query}"
    return urls
