"""Dashboard response schema."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from tickerboard.domain.snapshot import FinancialSnapshot


class DashboardResponse(BaseModel):
    """Snapshot plus the notice the UI must show for simulated data."""

    snapshot: FinancialSnapshot
    notice: Optional[str] = Field(
        default=None,
        description="Set exactly when the snapshot is synthetic; explains why",
    )
