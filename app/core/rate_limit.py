"""Debounce and throttle wrappers for client-triggered operations.

Both shapers are tiny two-state machines:

- ``Debouncer``: IDLE -> PENDING on a call (timer armed), PENDING -> PENDING
  on another call (timer replaced), PENDING -> IDLE when the timer fires and
  the action runs with the latest arguments.
- ``Throttler``: IDLE -> PENDING on a call (action runs, window opens); calls
  while PENDING are dropped; the window closes once ``window`` seconds have
  passed since it opened.

Wrapped calls are fire-and-forget: they return None, and errors raised by the
action are logged rather than propagated.

A ``Debouncer`` needs an event loop for its timer: the one passed as
``loop``, or else the running loop. Without either, calls are logged and
dropped. A ``Throttler`` runs sync actions anywhere; async actions are
scheduled as tasks and need a running loop, otherwise the call is dropped
and the window stays closed.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

# Strong refs to tasks spawned from async actions until they finish
_background_tasks: set[asyncio.Task] = set()


class ShaperState(StrEnum):
    IDLE = "idle"
    PENDING = "pending"


def _run_action(
    action: Callable[..., Any],
    args: tuple,
    kwargs: dict,
    loop: asyncio.AbstractEventLoop | None = None,
) -> bool:
    """Invoke ``action``; schedule it as a task if it returns an awaitable.

    Returns False when the action could not run: an awaitable result needs
    an event loop, and without one it is closed and dropped.
    """
    try:
        result = action(*args, **kwargs)
    except Exception:
        logger.exception("Rate-shaped call to %r failed", action)
        return True

    if not inspect.isawaitable(result):
        return True

    if loop is None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop for async action %r, call dropped", action)
            if inspect.iscoroutine(result):
                result.close()
            return False

    task = loop.create_task(_await(result))
    _background_tasks.add(task)
    task.add_done_callback(_on_task_done)
    return True


async def _await(pending: Awaitable[Any]) -> Any:
    return await pending


def _on_task_done(task: asyncio.Task) -> None:
    _background_tasks.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.error("Rate-shaped task failed", exc_info=task.exception())


class Debouncer:
    """Run ``action`` only after ``wait`` seconds with no further calls."""

    def __init__(
        self,
        action: Callable[..., Any],
        wait: float,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.action = action
        self.wait = wait
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self.state = ShaperState.IDLE

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.warning("No running event loop for debounced %r, call dropped", self.action)
                return
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.wait, self._fire, loop, args, kwargs)
        self.state = ShaperState.PENDING

    def _fire(self, loop: asyncio.AbstractEventLoop, args: tuple, kwargs: dict) -> None:
        self._handle = None
        self.state = ShaperState.IDLE
        _run_action(self.action, args, kwargs, loop)


class Throttler:
    """Fixed-window, leading-edge throttle."""

    def __init__(
        self,
        action: Callable[..., Any],
        window: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.action = action
        self.window = window
        self._clock = clock
        self._opened_at: float | None = None

    @property
    def state(self) -> ShaperState:
        if self._opened_at is None:
            return ShaperState.IDLE
        if self._clock() - self._opened_at >= self.window:
            self._opened_at = None
            return ShaperState.IDLE
        return ShaperState.PENDING

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        if self.state is ShaperState.PENDING:
            return
        self._opened_at = self._clock()
        if not _run_action(self.action, args, kwargs):
            self._opened_at = None


def debounce(
    action: Callable[..., Any] | float,
    wait: float | None = None,
    *,
    loop: asyncio.AbstractEventLoop | None = None,
):
    """``debounce(fn, 0.2)`` or ``@debounce(0.2)``."""
    if wait is None:
        delay = float(action)  # type: ignore[arg-type]
        return lambda fn: Debouncer(fn, delay, loop=loop)
    return Debouncer(action, wait, loop=loop)  # type: ignore[arg-type]


def throttle(
    action: Callable[..., Any] | float,
    window: float | None = None,
    *,
    clock: Callable[[], float] = time.monotonic,
):
    """``throttle(fn, 1.0)`` or ``@throttle(1.0)``."""
    if window is None:
        limit = float(action)  # type: ignore[arg-type]
        return lambda fn: Throttler(fn, limit, clock=clock)
    return Throttler(action, window, clock=clock)  # type: ignore[arg-type]
