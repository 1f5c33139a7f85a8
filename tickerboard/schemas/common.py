"""Common schemas and error responses."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Error body shared by every endpoint."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "error": "Upstream returned HTML instead of JSON (possible bot-protection block).",
                "code": "UPSTREAM_BLOCKED",
                "httpStatus": 403,
                "preview": "<!DOCTYPE html><html lang=\"en-US\"><head><title>Just a moment...</title>",
            }
        },
    )

    error: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code", examples=["DOMAIN_NOT_ALLOWED"])
    http_status: Optional[int] = Field(
        default=None, alias="httpStatus", description="Status the upstream answered with"
    )
    preview: Optional[str] = Field(default=None, description="Leading characters of the upstream body")
    details: Optional[Any] = Field(default=None, description="Additional error details")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall health status", examples=["healthy", "degraded"])
    version: str = Field(..., description="Application version")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    checks: Dict[str, bool] = Field(default_factory=dict, description="Individual configuration checks")
