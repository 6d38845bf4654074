"""Rate limits for login, the public contact form and the API default."""

import logging
import os

from slowapi import Limiter
from slowapi.util import get_remote_address

from securebond.core.config import settings

logger = logging.getLogger(__name__)

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
IS_TESTING = os.getenv("TESTING", "").lower() in ("1", "true", "yes")


def _storage_uri() -> str:
    """Redis when reachable so every worker shares counters, memory otherwise."""
    if IS_TESTING:
        return "memory://"
    try:
        import redis

        redis.from_url(REDIS_URL, socket_connect_timeout=1).ping()
        return REDIS_URL
    except Exception as e:
        logger.warning("Redis unavailable for rate limiting, using in-memory: %s", e)
        return "memory://"


STORAGE_URI = _storage_uri()

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=STORAGE_URI,
    default_limits=[] if settings.RATE_LIMIT_API <= 0 else [f"{settings.RATE_LIMIT_API}/minute"],
    # Fixtures log in repeatedly
    enabled=not IS_TESTING,
)


def redis_backed() -> bool:
    return STORAGE_URI.startswith("redis")
