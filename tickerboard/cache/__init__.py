"""HTTP cache headers for relayed responses."""

from .http_cache import (
    CacheableResponse,
    NotModifiedResponse,
    check_if_none_match,
    generate_etag,
)


__all__ = [
    "CacheableResponse",
    "NotModifiedResponse",
    "check_if_none_match",
    "generate_etag",
]
