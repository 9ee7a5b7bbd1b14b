"""Cache inspection and invalidation endpoints."""

import logging

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from app.api.deps import Admin, Cache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cache", tags=["cache"], dependencies=[Admin])


class CacheStats(BaseModel):
    entries: int
    keys: list[str]


@router.get("", response_model=CacheStats)
async def get_cache_stats(cache: Cache) -> CacheStats:
    """Entry count and keys. Expired entries still count until they are read."""
    return CacheStats(entries=len(cache), keys=cache.keys())


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_all(cache: Cache) -> Response:
    logger.info("Clearing response cache (%d entries)", len(cache))
    cache.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{key:path}", status_code=status.HTTP_204_NO_CONTENT)
async def clear_key(key: str, cache: Cache) -> Response:
    logger.info("Clearing response cache key %s", key)
    cache.clear(key)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
