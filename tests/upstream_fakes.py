"""Canned upstream answers shared by the tests."""

from __future__ import annotations

import json
from typing import Any

import httpx

UPSTREAM = "https://statusinvest.com.br"

CHALLENGE_PAGE = (
    "<!DOCTYPE html><html lang=\"en-US\"><head><title>Just a moment...</title>"
    "</head><body><noscript>Enable JavaScript and cookies to continue</noscript>"
    "</body></html>"
)


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(payload).encode(),
        headers={"Content-Type": "application/json; charset=utf-8"},
    )


def html_response(status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=CHALLENGE_PAGE.encode(),
        headers={"Content-Type": "text/html; charset=UTF-8"},
    )
