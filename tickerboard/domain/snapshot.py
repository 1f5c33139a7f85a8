"""Snapshot domain models.

The normalized per-ticker result handed to the presentation layer.
Plain structured data: no chart library types cross this boundary.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field, model_validator

from tickerboard.domain.ticker import AssetCategory


class SeriesPoint(BaseModel):
    """One chart point, in upstream order."""

    label: str = Field(..., description="Category label (year, date, month)")
    value: float = Field(0.0, description="Numeric value, 0 when missing")

    model_config = {"frozen": True}


class EarningsPoint(SeriesPoint):
    """One earnings event (dividend, JCP, income distribution)."""

    kind: str = Field("", description="Earnings type tag as reported upstream")


# Field order is the order of the six aggregate slots
SERIES_FIELDS = ("net_worth", "revenue", "expenses", "cash", "net_result")


class FinancialSnapshot(BaseModel):
    """Aggregate result for one ticker query.

    Built once per completed query and replaced wholesale by the next one.
    A synthetic snapshot never mixes in real series.
    """

    ticker: str = Field(..., description="Normalized ticker symbol")
    category: AssetCategory = Field(default=AssetCategory.EQUITY)
    is_synthetic: bool = Field(default=False)
    fallback_reason: str | None = Field(
        None, description="Why synthetic data was produced"
    )

    net_worth: list[SeriesPoint] = Field(default_factory=list)
    revenue: list[SeriesPoint] = Field(default_factory=list)
    expenses: list[SeriesPoint] = Field(default_factory=list)
    cash: list[SeriesPoint] = Field(default_factory=list)
    net_result: list[SeriesPoint] = Field(default_factory=list)
    earnings: list[EarningsPoint] = Field(default_factory=list)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _reason_only_when_synthetic(self) -> "FinancialSnapshot":
        if self.fallback_reason and not self.is_synthetic:
            raise ValueError("fallback_reason is only valid on synthetic snapshots")
        return self

    @computed_field
    @property
    def is_empty(self) -> bool:
        """True when no series has a single point."""
        return not any(getattr(self, name) for name in (*SERIES_FIELDS, "earnings"))
