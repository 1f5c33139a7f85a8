"""Request and response schemas."""

from .common import ErrorResponse, HealthResponse
from .dashboard import DashboardResponse


__all__ = [
    "DashboardResponse",
    "ErrorResponse",
    "HealthResponse",
]
