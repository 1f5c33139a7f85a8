"""API dependencies."""

from __future__ import annotations

import httpx
from fastapi import Request


__all__ = ["get_http_client"]


def get_http_client(request: Request) -> httpx.AsyncClient | None:
    """
    Shared outbound client opened in the app lifespan.

    None when the app runs without its lifespan (callers then open a
    short-lived client per request).
    """
    return getattr(request.app.state, "http_client", None)
