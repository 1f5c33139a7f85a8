"""
Centralized Data Conversion Helpers.

Safe conversion utilities for loosely-typed upstream JSON.

Usage:
    from tickerboard.core.data_helpers import safe_float, first_present
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

import pandas as pd


def _is_na(value: Any) -> bool:
    """Check for pandas NA/NaT on scalars only (pd.isna broadcasts on lists)."""
    if isinstance(value, (list, tuple, dict, set)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def safe_float(value: Any, default: float | None = None) -> float | None:
    """
    Safely convert value to float.

    Handles None, NaN, Inf, pandas NA/NaT, booleans and conversion errors.
    Numeric strings such as "1.5" are parsed.

    Args:
        value: Any value to convert
        default: Default to return if conversion fails

    Returns:
        Float value or default if conversion fails
    """
    if value is None or isinstance(value, bool):
        return default
    if _is_na(value):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        f = float(value)
    except (ValueError, TypeError, OverflowError):
        return default
    if math.isnan(f) or math.isinf(f):
        return default
    return f


def first_present(item: Any, *keys: str) -> Any:
    """Return the first value among `keys` that exists and is not None."""
    if not isinstance(item, Mapping):
        return None
    for key in keys:
        value = item.get(key)
        if value is not None:
            return value
    return None
