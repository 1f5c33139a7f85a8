"""Ticker domain models.

A query symbol and the asset category the upstream files it under.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class AssetCategory(str, Enum):
    """Asset class as inferred from the upstream search."""

    EQUITY = "equity"
    REAL_ESTATE_FUND = "real_estate_fund"
    AGRIBUSINESS = "agribusiness"

    @property
    def path_segment(self) -> str:
        """Upstream URL segment the category's data endpoints live under."""
        return _PATH_SEGMENTS[self]


_PATH_SEGMENTS = {
    AssetCategory.EQUITY: "acoes",
    AssetCategory.REAL_ESTATE_FUND: "fii",
    AssetCategory.AGRIBUSINESS: "fiagro",
}


class TickerQuery(BaseModel):
    """User-supplied symbol, trimmed and uppercased. Blank is invalid."""

    symbol: str = Field(..., min_length=1, description="Ticker symbol (uppercase)")

    model_config = {"frozen": True}

    @field_validator("symbol", mode="before")
    @classmethod
    def normalize_symbol(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def __str__(self) -> str:
        return self.symbol
