"""API routes package."""

from . import dashboard, health, relay


__all__ = [
    "dashboard",
    "health",
    "relay",
]
