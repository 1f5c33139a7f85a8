"""Tickerboard: upstream relay and normalized financial snapshots for a dashboard."""

__version__ = "1.0.0"
