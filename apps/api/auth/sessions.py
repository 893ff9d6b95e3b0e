"""
Session cache backed by Redis.

Maps opaque session tokens to user ids with a fixed time-to-live measured
from creation. Lookups never extend the TTL.
"""

import logging
from typing import Any

import redis

from apps.api.auth.security import generate_session_token
from packages.shared.exceptions import InfrastructureError

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "auth_"
DEFAULT_SESSION_TTL_SECONDS = 24 * 60 * 60


class SessionStore:
    """Token -> user id mapping with expiry."""

    def __init__(
        self,
        redis_client: Any,
        ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
    ):
        """
        Args:
            redis_client: redis-py client (or anything with setex/get/delete)
            ttl_seconds: Session lifetime
        """
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def key(token: str) -> str:
        """Cache key for a token."""
        return f"{SESSION_KEY_PREFIX}{token}"

    def create(self, user_id: str) -> str:
        """Open a session for a user and return its token."""
        token = generate_session_token()
        try:
            self.redis.setex(self.key(token), self.ttl_seconds, str(user_id))
        except redis.RedisError as e:
            logger.error(f"Session write failed: {e}")
            raise InfrastructureError("Session store unavailable") from e
        return token

    def resolve(self, token: str | None) -> str | None:
        """Return the user id for a live token, None otherwise."""
        if not token:
            return None
        try:
            value = self.redis.get(self.key(token))
        except redis.RedisError as e:
            logger.error(f"Session lookup failed: {e}")
            raise InfrastructureError("Session store unavailable") from e
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def revoke(self, token: str) -> bool:
        """Delete a session.

        Returns:
            True if a session was deleted, False if it was already gone.
        """
        try:
            return bool(self.redis.delete(self.key(token)))
        except redis.RedisError as e:
            logger.error(f"Session delete failed: {e}")
            raise InfrastructureError("Session store unavailable") from e
