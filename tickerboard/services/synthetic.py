"""
Synthetic fallback data.

Only used when every real endpoint came back empty, so the dashboard
still has something structurally plausible to draw. Values are random;
callers must label the result as simulated.
"""

from __future__ import annotations

from datetime import date

import numpy as np

from tickerboard.domain.snapshot import EarningsPoint, FinancialSnapshot, SeriesPoint
from tickerboard.domain.ticker import AssetCategory

YEARS = 6
MONTHS = ("Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez")

DEFAULT_REASON = "Upstream returned no usable data; showing simulated figures."

# series -> (baseline, yearly step, jitter ceiling)
SERIES_PROFILES: dict[str, tuple[float, float, float]] = {
    "net_worth": (1_000_000_000, 150_000_000, 50_000_000),
    "revenue": (200_000_000, 20_000_000, 10_000_000),
    "expenses": (150_000_000, 10_000_000, 5_000_000),
    "cash": (50_000_000, 5_000_000, 20_000_000),
    "net_result": (50_000_000, 10_000_000, 5_000_000),
}


def looks_like_fund(ticker: str) -> bool:
    """Brazilian fund tickers are four letters plus "11" (MXRF11, HGLG11)."""
    return len(ticker) == 6 and ticker.endswith("11")


def _yearly_series(
    rng: np.random.Generator, years: list[str], base: float, step: float, jitter: float
) -> list[SeriesPoint]:
    values = base + step * np.arange(len(years)) + rng.uniform(0, jitter, size=len(years))
    return [SeriesPoint(label=y, value=float(v)) for y, v in zip(years, values)]


def _monthly_earnings(rng: np.random.Generator, is_fund: bool) -> list[EarningsPoint]:
    if is_fund:
        # Funds distribute every month, in a narrow band
        values = 0.8 + rng.uniform(0, 0.4, size=len(MONTHS))
        return [
            EarningsPoint(label=m, value=float(v), kind="Rendimento")
            for m, v in zip(MONTHS, values)
        ]

    pays = rng.random(len(MONTHS)) > 0.7
    amounts = 1.5 + rng.uniform(0, 2, size=len(MONTHS))
    return [
        EarningsPoint(
            label=m,
            value=float(a) if paid else 0.0,
            kind="Dividendo" if paid else "",
        )
        for m, a, paid in zip(MONTHS, amounts, pays)
    ]


def generate_synthetic(
    ticker: str,
    reason: str | None = None,
    *,
    end_year: int | None = None,
    seed: int | None = None,
) -> FinancialSnapshot:
    """
    Build a fully synthetic snapshot.

    Args:
        ticker: Normalized ticker; decides fund vs equity by its shape
        reason: Why real data was unavailable (shown to the user)
        end_year: Last year of the yearly series (defaults to this year)
        seed: Seed for reproducible output
    """
    rng = np.random.default_rng(seed)
    is_fund = looks_like_fund(ticker)
    last = end_year or date.today().year
    years = [str(y) for y in range(last - YEARS + 1, last + 1)]

    series = {
        name: _yearly_series(rng, years, *profile)
        for name, profile in SERIES_PROFILES.items()
    }

    return FinancialSnapshot(
        ticker=ticker,
        category=AssetCategory.REAL_ESTATE_FUND if is_fund else AssetCategory.EQUITY,
        is_synthetic=True,
        fallback_reason=reason or DEFAULT_REASON,
        earnings=_monthly_earnings(rng, is_fund),
        **series,
    )
