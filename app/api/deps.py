"""FastAPI dependencies for the response cache and admin authentication."""

import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.cache import ResponseCache
from app.core.config import Settings, get_settings

bearer_scheme = HTTPBearer(auto_error=False)


def get_cache(request: Request) -> ResponseCache:
    """The process-wide store attached to the app at creation time."""
    return request.app.state.cache


async def require_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """Check the bearer token against ``ADMIN_TOKEN``."""
    if not settings.admin_token:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Cache admin is not configured",
        )
    if credentials is None or not secrets.compare_digest(
        credentials.credentials.encode(), settings.admin_token.encode()
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token",
        )


# Typed shorthand for use in route signatures
Cache = Annotated[ResponseCache, Depends(get_cache)]
Admin = Depends(require_admin)
