"""API module with routers and dependencies."""

from .app import create_api_app
from .dependencies import get_http_client


__all__ = [
    "create_api_app",
    "get_http_client",
]
