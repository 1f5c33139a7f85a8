"""Relay result variants.

`relay_fetch` never raises for upstream trouble; it returns one of these.
Only `RelaySuccess` carries data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class RelaySuccess:
    data: Any
    ok = True


@dataclass(frozen=True)
class RelayRejected:
    """Target refused before any outbound call."""

    reason: str
    malformed_url: bool = False
    ok = False


@dataclass(frozen=True)
class UpstreamBlocked:
    """Challenge/interstitial page instead of JSON."""

    http_status: int
    preview: str
    ok = False


@dataclass(frozen=True)
class UpstreamMalformed:
    preview: str
    ok = False


@dataclass(frozen=True)
class UpstreamHttpError:
    http_status: int
    ok = False


@dataclass(frozen=True)
class NetworkFailure:
    message: str
    ok = False


RelayResponse = Union[
    RelaySuccess,
    RelayRejected,
    UpstreamBlocked,
    UpstreamMalformed,
    UpstreamHttpError,
    NetworkFailure,
]
