"""Timing helpers that log how long a call took."""

import functools
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)


def _log_elapsed(name: str, start: float) -> None:
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("%s took %.3f milliseconds", name, elapsed_ms)


async def _finish(name: str, start: float, pending: Awaitable[Any]) -> Any:
    try:
        return await pending
    finally:
        _log_elapsed(name, start)


def measure_performance(name: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call ``fn`` and log its duration under ``name``.

    If ``fn`` returns an awaitable, a coroutine is returned instead; the
    duration is logged once it settles, whether it succeeds or raises.
    """
    start = time.perf_counter()
    try:
        result = fn(*args, **kwargs)
    except Exception:
        _log_elapsed(name, start)
        raise
    if inspect.isawaitable(result):
        return _finish(name, start, result)
    _log_elapsed(name, start)
    return result


def timed(name: str | None = None):
    """Decorator form of ``measure_performance`` for sync and async functions."""

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        label = name or fn.__qualname__

        if inspect.iscoroutinefunction(fn):
            @functools.wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                start = time.perf_counter()
                try:
                    return await fn(*args, **kwargs)
                finally:
                    _log_elapsed(label, start)

            return async_wrapper

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                _log_elapsed(label, start)

        return wrapper

    return decorator
