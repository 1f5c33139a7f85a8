"""
Chart data normalization.

The upstream answers its chart endpoints in more than one JSON shape.
Everything is reduced here to ordered `SeriesPoint` / `EarningsPoint`
lists. Unknown shapes give an empty list rather than an error.

Known series shapes (checked in this order):
    [{"date": "2023", "value": 123.4}, ...]         # also "d" / "v"
    {"categories": ["2022", "2023"], "series": [{"data": [1.0, 2.0]}]}

Earnings shape:
    {"assetEarningsModels": [{"ed": "15/01/2023", "pd": "...", "v": 0.1, "et": "Dividendo"}]}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pandas as pd

from tickerboard.core.data_helpers import first_present, safe_float
from tickerboard.domain.snapshot import EarningsPoint, SeriesPoint

EARNINGS_CONTAINER = "assetEarningsModels"
BR_DATE_FORMAT = "%d/%m/%Y"

_EPOCH = pd.Timestamp(0)


def _as_label(value: Any) -> str:
    return "" if value is None else str(value)


def _first_truthy(item: Mapping, *keys: str) -> Any:
    for key in keys:
        if item.get(key):
            return item[key]
    return None


def _is_point_list(raw: Any) -> bool:
    if not isinstance(raw, list) or not raw:
        return False
    head = raw[0]
    return isinstance(head, Mapping) and bool(head.get("date") or head.get("d"))


def normalize_series(raw: Any) -> list[SeriesPoint]:
    """Reduce one chart payload to labelled values, keeping source order."""
    if _is_point_list(raw):
        points = []
        for item in raw:
            if not isinstance(item, Mapping):
                item = {}
            points.append(
                SeriesPoint(
                    label=_as_label(_first_truthy(item, "date", "d", "year")),
                    value=safe_float(first_present(item, "value", "v"), 0.0),
                )
            )
        return points

    if isinstance(raw, Mapping):
        categories = raw.get("categories")
        series = raw.get("series")
        if isinstance(categories, list) and isinstance(series, list) and series:
            head = series[0]
            data = head.get("data") if isinstance(head, Mapping) else None
            if not isinstance(data, list):
                data = []
            return [
                SeriesPoint(label=_as_label(label), value=safe_float(value, 0.0))
                for label, value in zip(categories, data)
            ]

    return []


def parse_br_date(values: pd.Series) -> pd.Series:
    """Parse DD/MM/YYYY strictly; anything else becomes NaT."""
    return pd.to_datetime(values, format=BR_DATE_FORMAT, errors="coerce")


def normalize_earnings(raw: Any) -> list[EarningsPoint]:
    """
    Earnings events sorted by date, oldest first.

    The label is the ex-date (`ed`), or the payment date (`pd`) when the
    ex-date is absent. Unparseable dates sort as epoch zero; equal dates
    keep upstream order.
    """
    if not isinstance(raw, Mapping):
        return []
    records = raw.get(EARNINGS_CONTAINER)
    if not isinstance(records, list) or not records:
        return []

    rows = []
    for record in records:
        if not isinstance(record, Mapping):
            record = {}
        rows.append(
            {
                "label": _as_label(_first_truthy(record, "ed", "pd")),
                "value": safe_float(record.get("v"), 0.0),
                "kind": _as_label(record.get("et")),
            }
        )

    frame = pd.DataFrame(rows, columns=["label", "value", "kind"])
    frame["sort_key"] = parse_br_date(frame["label"]).fillna(_EPOCH)
    frame = frame.sort_values("sort_key", kind="stable")

    return [
        EarningsPoint(label=row.label, value=float(row.value), kind=row.kind)
        for row in frame.itertuples(index=False)
    ]
