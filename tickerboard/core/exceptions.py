"""Custom exceptions and centralized exception handlers."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .config import settings
from .logging import get_logger

logger = get_logger("errors")


class AppException(Exception):
    """Base application exception with structured error response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        status_code: int | None = None,
        details: Any = None,
    ):
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.status_code = status_code or self.status_code
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Error body: human message under `error`, machine code under `code`."""
        body: dict[str, Any] = {"error": self.message, "code": self.error_code}
        if self.details:
            body["details"] = self.details
        return body


class BadRequestError(AppException):
    """Bad request."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "BAD_REQUEST"
    message = "Bad request"


class ExternalServiceError(AppException):
    """External service error."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "EXTERNAL_SERVICE_ERROR"
    message = "External service temporarily unavailable"


class InvalidTickerError(BadRequestError):
    """Ticker was blank after trimming."""

    error_code = "INVALID_TICKER"
    message = "Ticker symbol is required."


class InvalidTargetError(BadRequestError):
    """Relay target missing or not an absolute http(s) URL."""

    error_code = "INVALID_URL"
    message = 'Query parameter "url" is required.'


class RelayRejectedError(AppException):
    """Relay target points outside the allowed upstream domain."""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "DOMAIN_NOT_ALLOWED"
    message = "Domain not allowed."


class UpstreamBlockedError(ExternalServiceError):
    """Upstream answered with markup (bot-protection challenge) instead of JSON."""

    error_code = "UPSTREAM_BLOCKED"
    message = "Upstream returned HTML instead of JSON (possible bot-protection block)."

    def __init__(self, http_status: int, preview: str, message: str | None = None):
        super().__init__(message)
        self.http_status = http_status
        self.preview = preview

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "httpStatus": self.http_status,
            "preview": self.preview,
        }


class UpstreamMalformedError(AppException):
    """Upstream body could not be parsed as JSON."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "UPSTREAM_INVALID_JSON"
    message = "Upstream response is not valid JSON."

    def __init__(self, preview: str, message: str | None = None):
        super().__init__(message)
        self.preview = preview

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "preview": self.preview}


class UpstreamStatusError(AppException):
    """Relay answered with a status outside its documented contract."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "UPSTREAM_HTTP_ERROR"
    message = "Upstream returned an unexpected status."

    def __init__(self, http_status: int, message: str | None = None):
        super().__init__(message)
        self.http_status = http_status

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "httpStatus": self.http_status}


class RelayNetworkError(AppException):
    """Transport-level failure talking to the upstream."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "RELAY_NETWORK_ERROR"
    message = "Internal relay error."


class AggregationFailedError(ExternalServiceError):
    """Every aggregate slot came back null or empty."""

    error_code = "AGGREGATION_FAILED"
    message = "Upstream returned no usable data (possible bot-protection block)."


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def register_exception_handlers(app: FastAPI) -> None:
    """Map AppException subclasses to their JSON bodies; anything else is a 500."""

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request, exc: AppException
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning(f"{request.method} {request.url.path} failed: {exc.error_code}")
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers={"X-Request-ID": _request_id(request)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            extra={"path": request.url.path, "method": request.method},
        )
        message = str(exc) if settings.debug else AppException.message
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": message, "code": AppException.error_code},
            headers={"X-Request-ID": _request_id(request)},
        )
