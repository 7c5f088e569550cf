"""Per-client rate limiting (slowapi, counters stored in Redis)."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from app.config import settings


def get_rate_limit_key(request: Request) -> str:
    """API key when present, otherwise the originating client IP."""
    api_key = request.headers.get("X-API-Key")
    if api_key:
        return f"key:{api_key}"

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_rate_limit_key,
    default_limits=[settings.rate_limit_default],
    storage_uri=settings.redis_url,
    enabled=settings.rate_limit_enabled,
)
