"""Domain models for strongly-typed data throughout the application.

Usage:
    from tickerboard.domain import AssetCategory, FinancialSnapshot, TickerQuery

    query = TickerQuery(symbol=" mxrf11 ")   # symbol == "MXRF11"
    data = snapshot.model_dump()
"""

from tickerboard.domain.relay import (
    NetworkFailure,
    RelayRejected,
    RelayResponse,
    RelaySuccess,
    UpstreamBlocked,
    UpstreamHttpError,
    UpstreamMalformed,
)
from tickerboard.domain.snapshot import (
    SERIES_FIELDS,
    EarningsPoint,
    FinancialSnapshot,
    SeriesPoint,
)
from tickerboard.domain.ticker import (
    AssetCategory,
    TickerQuery,
)

__all__ = [
    # Ticker
    "AssetCategory",
    "TickerQuery",
    # Relay
    "NetworkFailure",
    "RelayRejected",
    "RelayResponse",
    "RelaySuccess",
    "UpstreamBlocked",
    "UpstreamHttpError",
    "UpstreamMalformed",
    # Snapshot
    "SERIES_FIELDS",
    "EarningsPoint",
    "FinancialSnapshot",
    "SeriesPoint",
]
