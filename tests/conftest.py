"""Shared test fixtures: fake clock/loop, fresh cache store + test client."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from app.core import cache as cache_module
from app.core.cache import ResponseCache
from app.core.config import Settings, get_settings
from app.main import app

ADMIN_TOKEN = "test-admin-token"  # noqa: S105


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTimerHandle:
    def __init__(self, when: float, callback, args: tuple) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeLoop:
    """Just enough of an event loop for ``call_later``-driven code."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[FakeTimerHandle] = []

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback, *args) -> FakeTimerHandle:
        handle = FakeTimerHandle(self.now + delay, callback, args)
        self.timers.append(handle)
        return handle

    def advance_to(self, when: float) -> None:
        """Move time forward, firing due timers in order."""
        while True:
            due = sorted(
                (h for h in self.timers if not h.cancelled and h.when <= when),
                key=lambda h: h.when,
            )
            if not due:
                break
            handle = due[0]
            self.timers.remove(handle)
            self.now = handle.when
            handle.callback(*handle.args)
        self.now = when


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_loop() -> FakeLoop:
    return FakeLoop()


@pytest.fixture
def store(clock: FakeClock) -> ResponseCache:
    return ResponseCache(clock=clock)


@pytest.fixture
def admin_headers() -> dict:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async test client with a fresh cache and a known admin token."""
    fresh = ResponseCache()
    previous = app.state.cache
    app.state.cache = fresh
    app.dependency_overrides[get_settings] = lambda: Settings(admin_token=ADMIN_TOKEN)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.cache = previous


@pytest.fixture(autouse=True)
def _reset_default_cache():
    cache_module.default_cache.clear()
    yield
    cache_module.default_cache.clear()
