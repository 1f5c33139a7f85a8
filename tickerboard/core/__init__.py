"""Core infrastructure: settings, logging, exceptions."""

from .config import Settings, get_settings, settings
from .exceptions import (
    AggregationFailedError,
    AppException,
    BadRequestError,
    ExternalServiceError,
    InvalidTargetError,
    InvalidTickerError,
    RelayNetworkError,
    RelayRejectedError,
    UpstreamBlockedError,
    UpstreamMalformedError,
    UpstreamStatusError,
)


__all__ = [
    "AggregationFailedError",
    "AppException",
    "BadRequestError",
    "ExternalServiceError",
    "InvalidTargetError",
    "InvalidTickerError",
    "RelayNetworkError",
    "RelayRejectedError",
    "Settings",
    "UpstreamBlockedError",
    "UpstreamMalformedError",
    "UpstreamStatusError",
    "get_settings",
    "settings",
]
