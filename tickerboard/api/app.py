"""API application factory."""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from tickerboard.core.config import settings
from tickerboard.core.exceptions import register_exception_handlers
from tickerboard.core.logging import get_logger, request_id_var, setup_logging
from tickerboard.schemas.common import ErrorResponse

from .routes import dashboard, health, relay


logger = get_logger("api")

# Probed every few seconds by the platform; not worth a log line each
_QUIET_PATHS = frozenset({"/health/live"})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own one outbound client for the app's lifetime."""
    setup_logging()
    app.state.http_client = httpx.AsyncClient(timeout=settings.relay_timeout)
    if settings.uses_remote_relay:
        logger.info(f"Relaying through {settings.relay_base_url} to {settings.upstream_base_url}")
    else:
        logger.info(f"Relaying in-process to {settings.upstream_base_url}")

    try:
        yield
    finally:
        await app.state.http_client.aclose()
        app.state.http_client = None


class RelayCORSMiddleware(CORSMiddleware):
    """CORS whose preflights always answer 200 with the advertised policy.

    Starlette rejects a preflight asking for unlisted headers with 400; here
    the browser is left to enforce `Access-Control-Allow-Headers` itself.
    """

    def preflight_response(self, request_headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code == 200:
            return response
        return Response(status_code=200, headers=dict(self.preflight_headers))


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = rid
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request; server errors at warning level."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = int((time.perf_counter() - started) * 1000)

        path = request.url.path
        if path in _QUIET_PATHS:
            return response

        # The relay's target URL is logged by the relay; only the path here
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{request.method} {path} {response.status_code} in {elapsed_ms}ms",
            extra={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
            },
        )
        return response


def create_api_app() -> FastAPI:
    """Build the relay/dashboard application."""
    docs_enabled = settings.debug or settings.is_development
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Browser-mimicking upstream relay and normalized dashboard snapshots",
        root_path=settings.root_path,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid input"},
            500: {"model": ErrorResponse, "description": "Relay failure"},
        },
    )

    # Added last runs first: CORS wraps request id wraps logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        RelayCORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )

    register_exception_handlers(app)

    for router, tag in (
        (health.router, "Health"),
        (relay.router, "Relay"),
        (dashboard.router, "Dashboard"),
    ):
        app.include_router(router, tags=[tag])

    return app
