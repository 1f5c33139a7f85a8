"""Relay, classification, aggregation and normalization services."""

from . import aggregator, classifier, dashboard, normalizer, relay, synthetic


__all__ = [
    "aggregator",
    "classifier",
    "dashboard",
    "normalizer",
    "relay",
    "synthetic",
]
