"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, AsyncGenerator, Generator

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from tickerboard.domain.relay import NetworkFailure, RelayResponse


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    from tickerboard.api.app import create_api_app

    app = create_api_app()
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Async test client (no lifespan: routes open their own outbound client)."""
    from tickerboard.api.app import create_api_app

    app = create_api_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def upstream_client() -> Callable[..., httpx.AsyncClient]:
    """Build an outbound client whose traffic is answered by `handler`.

    Every request the handler sees is appended to `client.requests`.
    """

    def _build(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        requests: list[httpx.Request] = []

        def _recording(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        mock_client = httpx.AsyncClient(transport=httpx.MockTransport(_recording))
        mock_client.requests = requests
        return mock_client

    return _build


@pytest.fixture
def fake_fetch() -> Callable[..., Any]:
    """Build a relay callable answering by URL substring.

    Unrouted URLs get a NetworkFailure. Called URLs land in `fetch.calls`.
    """

    def _build(
        routes: dict[str, RelayResponse] | None = None,
        default: RelayResponse | None = None,
    ):
        calls: list[str] = []

        async def fetch(url: str) -> RelayResponse:
            calls.append(url)
            for marker, result in (routes or {}).items():
                if marker in url:
                    return result
            return default or NetworkFailure("unrouted")

        fetch.calls = calls
        return fetch

    return _build


@pytest.fixture
def search_fii() -> list[dict]:
    """Search answer for a real-estate fund."""
    return [
        {
            "id": 1,
            "code": "MXRF11",
            "name": "MAXI RENDA FDO INV IMOB - FII",
            "url": "/fundos-imobiliarios/mxrf11",
            "type": 2,
        }
    ]


@pytest.fixture
def categories_payload() -> dict:
    """Chart payload in the categories/series shape."""
    return {
        "categories": ["2019", "2020", "2021", "2022", "2023"],
        "series": [
            {"name": "Patrimônio", "data": [1.1e9, 1.3e9, "1.5e9", None, 2.0e9]},
            {"name": "Outro", "data": [1, 2, 3, 4, 5]},
        ],
    }


@pytest.fixture
def points_payload() -> list[dict]:
    """Chart payload in the point-list shape."""
    return [
        {"date": "2021", "value": 10.5},
        {"d": "2022", "v": 12},
        {"date": "2023", "value": "n/a"},
    ]


@pytest.fixture
def earnings_payload() -> dict:
    """Earnings history, deliberately out of order."""
    return {
        "assetEarningsModels": [
            {"ed": "01/03/2023", "pd": "15/03/2023", "v": 0.1, "et": "Rendimento"},
            {"ed": "15/01/2023", "pd": "25/01/2023", "v": 0.11, "et": "Rendimento"},
            {"ed": "20/12/2022", "pd": "28/12/2022", "v": "0.12", "et": "Rendimento"},
        ]
    }
