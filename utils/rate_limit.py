"""
Rate Limiting Middleware

Coarse per-IP request limits using slowapi, backed by Redis when configured
(production) or in-memory storage (development). Business quotas (AI
discoveries, votes, flags) live in services.security.rate_limiter.

Usage:
    from utils.rate_limit import limiter, rate_limit_exceeded_handler

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from config.settings import settings
from utils.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Rate Limiter Configuration
# =============================================================================

def get_client_ip(request: Request) -> str:
    """
    Get client IP address from request.

    Handles X-Forwarded-For and X-Real-IP headers for requests behind a
    proxy/CDN. Returns "unknown" when nothing identifies the client.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request) or "unknown"


def _get_storage_uri() -> str:
    """
    Get storage URI for rate limiter.

    Uses Redis if configured, otherwise falls back to in-memory.
    """
    if settings.REDIS_URL:
        logger.info("Rate limiter using Redis storage")
        return settings.REDIS_URL
    else:
        logger.info("Rate limiter using in-memory storage")
        return "memory://"


limiter = Limiter(
    key_func=get_client_ip,
    default_limits=["200/minute"],
    storage_uri=_get_storage_uri(),
    enabled=settings.RATE_LIMIT_ENABLED,
)


# =============================================================================
# Rate Limit Presets
# =============================================================================

RATE_LIMITS = {
    "auth": "10/minute",          # Login/register
    "search": "30/minute",        # Search may trigger an AI call
    "autocomplete": "120/minute", # Typing-driven
    "default": "200/minute",      # General endpoints
}


# =============================================================================
# Exception Handler
# =============================================================================

async def rate_limit_exceeded_handler(
    request: Request,
    exc: RateLimitExceeded
) -> JSONResponse:
    """Handle rate limit exceeded exceptions."""
    client_ip = get_client_ip(request)
    logger.warning(f"Rate limit exceeded for {client_ip} on {request.url.path}")

    return JSONResponse(
        status_code=429,
        content={
            "error": "RateLimitExceeded",
            "message": f"Too many requests. Limit: {exc.detail}",
            "retry_after": "60 seconds"
        },
        headers={"Retry-After": "60"}
    )


# =============================================================================
# Decorator Helpers
# =============================================================================

def limit_auth(func):
    """Apply auth rate limit."""
    return limiter.limit(RATE_LIMITS["auth"])(func)


def limit_search(func):
    """Apply search rate limit."""
    return limiter.limit(RATE_LIMITS["search"])(func)


def limit_autocomplete(func):
    """Apply autocomplete rate limit."""
    return limiter.limit(RATE_LIMITS["autocomplete"])(func)
