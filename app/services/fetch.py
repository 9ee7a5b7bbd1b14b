"""Cached fetch: serve JSON API responses from the in-process cache.

On a miss the request goes out once; failures raise ``FetchError`` and are
never cached. There is no retry, no stale fallback and no single-flight:
concurrent misses for the same key each fetch, and the last write wins.
"""

import logging
from typing import Any

import httpx

from app.core.cache import ResponseCache, default_cache
from app.core.config import get_settings
from app.core.errors import FetchError

logger = logging.getLogger(__name__)

_MISSING = object()


def build_client() -> httpx.AsyncClient:
    """HTTP client pointed at the configured upstream API."""
    settings = get_settings()
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=settings.http_timeout,
        follow_redirects=True,
    )


def default_headers(headers: dict[str, str] | None = None) -> dict[str, str]:
    """Cache-Control hint merged under the caller's headers (caller wins)."""
    merged = {"Cache-Control": get_settings().cache_control_header}
    if headers:
        merged.update(headers)
    return merged


async def cached_fetch(
    url: str,
    *,
    key: str,
    ttl: float | None = None,
    method: str = "GET",
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    json: Any = None,
    client: httpx.AsyncClient | None = None,
    cache: ResponseCache | None = None,
) -> Any:
    """Return the JSON payload for ``url``, consulting ``cache`` under ``key`` first."""
    store = cache if cache is not None else default_cache
    if ttl is None:
        ttl = get_settings().default_cache_ttl

    cached = store.get(key, _MISSING)
    if cached is not _MISSING:
        logger.debug("Cache hit for %s", key)
        return cached

    logger.debug("Cache miss for %s, fetching %s %s", key, method, url)
    request_kwargs: dict[str, Any] = {"headers": default_headers(headers), "params": params}
    if json is not None:
        request_kwargs["json"] = json

    if client is None:
        async with build_client() as own_client:
            response = await own_client.request(method, url, **request_kwargs)
    else:
        response = await client.request(method, url, **request_kwargs)

    if not response.is_success:
        logger.warning("Fetch failed for %s: status %d", url, response.status_code)
        raise FetchError(response.status_code, url)

    payload = response.json()
    store.set(key, payload, ttl)
    return payload
