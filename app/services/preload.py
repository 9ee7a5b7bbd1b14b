"""Best-effort warmup of frequently used API endpoints.

Requests carry the Cache-Control hint so HTTP intermediaries can keep a copy;
the in-process response cache is not populated. Errors never reach the caller.
"""

import asyncio
import logging

import httpx

from app.core.config import get_settings
from app.services.fetch import build_client, default_headers

logger = logging.getLogger(__name__)

_pending: set[asyncio.Task] = set()


async def warm_endpoints(
    endpoints: list[str] | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> None:
    """Fire one GET per endpoint concurrently. Never raises."""
    if endpoints is None:
        endpoints = get_settings().preload_endpoints
    if not endpoints:
        return

    try:
        if client is None:
            async with build_client() as own_client:
                await _warm_all(own_client, endpoints)
        else:
            await _warm_all(client, endpoints)
    except Exception:
        logger.debug("Preload aborted", exc_info=True)


async def _warm_all(client: httpx.AsyncClient, endpoints: list[str]) -> None:
    await asyncio.gather(*[_warm_one(client, endpoint) for endpoint in endpoints])


async def _warm_one(client: httpx.AsyncClient, endpoint: str) -> None:
    try:
        await client.get(endpoint, headers=default_headers())
    except Exception as e:
        logger.debug("Preload of %s failed: %s", endpoint, e)


def warm_endpoints_sync(endpoints: list[str] | None = None) -> None:
    """Blocking warmup for callers without an event loop. Never raises."""
    asyncio.run(warm_endpoints(endpoints))


def preload_resources() -> None:
    """Schedule ``warm_endpoints`` as a background task on the running loop.

    Outside a running loop this falls back to ``warm_endpoints_sync`` and
    blocks the caller until every request settles (up to ``http_timeout``).
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        warm_endpoints_sync()
        return

    task = loop.create_task(warm_endpoints())
    _pending.add(task)
    task.add_done_callback(_pending.discard)


def cancel_pending() -> None:
    """Cancel warmup tasks that are still in flight (used on shutdown)."""
    for task in list(_pending):
        task.cancel()
