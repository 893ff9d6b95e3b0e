"""
Redis client setup (sync redis-py).

The same Redis instance backs the session cache and the arq job queue.
"""

import logging
from collections.abc import Generator
from typing import Any

import redis

from apps.api.config import get_settings

logger = logging.getLogger(__name__)

# --- Configuration ---
REDIS_URL = get_settings().redis_url


# --- Dependency ---
def get_redis() -> Generator[Any, None, None]:
    """Yield a Redis client with 1s timeouts. Use as FastAPI dependency."""
    client = redis.from_url(
        REDIS_URL,
        socket_timeout=1,
        socket_connect_timeout=1,
    )
    try:
        yield client
    finally:
        client.close()


def redis_is_alive(client: Any) -> bool:
    """True if the server answers PING."""
    try:
        return bool(client.ping())
    except Exception as e:
        logger.warning(f"Redis ping failed: {e}")
        return False
