"""
Cache headers for relayed and dashboard responses.

Relayed upstream JSON may sit in a shared cache (CDN) for a short window
and be served stale while it refreshes. Simulated dashboard data must not
be cached anywhere, so it gets `no-store` and no validator.

Usage:
    from tickerboard.cache.http_cache import CacheableResponse

    return CacheableResponse(data, s_maxage=300, stale_while_revalidate=60)
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse


def generate_etag(data: Any) -> str:
    """Weak validator over the canonical JSON form of `data`."""
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    digest = hashlib.sha1(canonical.encode(), usedforsecurity=False).hexdigest()
    return f'W/"{digest[:20]}"'


def _opaque_tag(tag: str) -> str:
    tag = tag.strip()
    return tag[2:].strip('"') if tag.startswith("W/") else tag.strip('"')


def check_if_none_match(request: Request, etag: str) -> bool:
    """Weak comparison of If-None-Match against `etag`; `*` matches anything."""
    header = request.headers.get("If-None-Match", "").strip()
    if not header:
        return False
    if header == "*":
        return True
    return _opaque_tag(etag) in {_opaque_tag(candidate) for candidate in header.split(",")}


def cache_control(
    *,
    max_age: int | None = None,
    s_maxage: int | None = None,
    stale_while_revalidate: int = 0,
    private: bool = False,
    no_store: bool = False,
) -> str:
    """Cache-Control value; `no_store` overrides everything else."""
    if no_store:
        return "no-store"

    directives = ["private" if private else "public"]
    if max_age is not None:
        directives.append(f"max-age={max_age}")
    # Shared caches never see private responses
    if s_maxage is not None and not private:
        directives.append(f"s-maxage={s_maxage}")
    if stale_while_revalidate:
        directives.append(f"stale-while-revalidate={stale_while_revalidate}")
    return ", ".join(directives)


class CacheableResponse(JSONResponse):
    """
    JSON body plus Cache-Control and (unless `no_store`) a weak ETag.

    Keyword arguments other than `etag` feed `cache_control()`; `etag`
    defaults to one computed from `content`.
    """

    def __init__(
        self,
        content: Any,
        *,
        max_age: int | None = None,
        s_maxage: int | None = None,
        stale_while_revalidate: int = 0,
        private: bool = False,
        no_store: bool = False,
        etag: str | None = None,
        status_code: int = 200,
        headers: dict | None = None,
    ):
        super().__init__(content, status_code=status_code, headers=headers)
        self.headers["Cache-Control"] = cache_control(
            max_age=max_age,
            s_maxage=s_maxage,
            stale_while_revalidate=stale_while_revalidate,
            private=private,
            no_store=no_store,
        )
        if not no_store:
            self.headers["ETag"] = etag or generate_etag(content)


class NotModifiedResponse(Response):
    """Empty 304 carrying the validator the client already holds."""

    def __init__(self, etag: str, headers: dict | None = None):
        super().__init__(status_code=304, headers=headers)
        self.headers["ETag"] = etag
