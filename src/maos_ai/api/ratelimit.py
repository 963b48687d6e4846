"""Rate limiting configuration for API endpoints.

Uses slowapi with in-memory storage; every replica limits on its own.
"""

import logging

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from maos_ai.api.deps import SESSION_COOKIE

logger = logging.getLogger(__name__)


def _session_token(request: Request) -> str | None:
    scheme, _, credentials = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials
    return request.cookies.get(SESSION_COOKIE)


def _get_rate_limit_key(request: Request) -> str:
    """Get rate limit key based on session token or IP.

    Only a short token prefix is used so the full secret never lands in the
    limiter storage.
    """
    token = _session_token(request)
    if token:
        return f"session:{token[:16]}"
    return get_remote_address(request)


limiter = Limiter(
    key_func=_get_rate_limit_key,
    storage_uri="memory://",
    strategy="fixed-window",
)


def rate_limit_exceeded_handler(request: Request, exc: Exception) -> Response:
    """Custom handler for rate limit exceeded errors."""
    detail = str(exc.detail) if isinstance(exc, RateLimitExceeded) else str(exc)
    logger.warning("rate_limit_exceeded path=%s limit=%s", request.url.path, detail)

    return JSONResponse(
        status_code=429,
        content={
            "error": "too_many_requests",
            "message": "Trop de requêtes. Merci de patienter un instant.",
            "detail": detail,
        },
        headers={"Retry-After": "60"},
    )


# ----- Rate Limit Decorators -----
# Usage: @limiter.limit(RATE_LIMIT_AI)

RATE_LIMIT_AI = "20/minute"              # Paid AI/speech providers behind the endpoint
RATE_LIMIT_HEALTH = "60/minute"
