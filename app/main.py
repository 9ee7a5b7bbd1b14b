"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import v1_router
from app.core.cache import default_cache
from app.core.config import get_settings
from app.core.errors import register_error_handlers
from app.services.preload import cancel_pending, preload_resources

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format="%(levelname)s %(name)s: %(message)s")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup: optional best-effort warmup of upstream endpoints
    if get_settings().preload_on_startup:
        logger.info("Preloading upstream endpoints")
        preload_resources()
    yield
    # Shutdown: drop any warmup still in flight
    cancel_pending()


_settings = get_settings()
configure_logging(_settings.log_level)

app = FastAPI(
    title="Invoice Response Cache",
    version="0.1.0",
    description="Ephemeral API response cache and rate shapers",
    lifespan=lifespan,
)
app.state.cache = default_cache

# ── CORS ─────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in _settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# ── API routes ───────────────────────────────────────────────
app.include_router(v1_router)


@app.get("/health", tags=["system"])
async def health_check() -> dict:
    return {"status": "ok"}
