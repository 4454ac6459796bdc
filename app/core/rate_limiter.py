"""
Redis-based rate limiting.

Fixed-window counters keyed by caller and endpoint group. The limiter fails
open: if Redis is unreachable the request is allowed and the error logged.
"""

import logging
import redis
from fastapi import HTTPException, status
from app.core.config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Redis-based rate limiter for protecting endpoints.

    Uses fixed-window counters with automatic expiration.
    """

    def __init__(self):
        self.redis_client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            decode_responses=True,
            socket_connect_timeout=1,
            socket_timeout=1,
        )

    def check_rate_limit(
        self,
        key: str,
        max_requests: int,
        window_seconds: int,
        error_message: str = "Rate limit exceeded"
    ) -> None:
        """
        Check if a request is within rate limits.

        Args:
            key: Unique identifier for this rate limit (e.g., "upload:10.0.0.1")
            max_requests: Maximum number of requests allowed in the window
            window_seconds: Window length in seconds
            error_message: Message used when the limit is exceeded

        Raises:
            HTTPException: 429 Too Many Requests if rate limit exceeded
        """
        if not settings.RATE_LIMIT_ENABLED:
            return

        try:
            current_count = self.redis_client.get(key)

            if current_count is None:
                self.redis_client.setex(key, window_seconds, 1)
                return

            if int(current_count) >= max_requests:
                ttl = self.redis_client.ttl(key)
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=f"{error_message}. Try again in {ttl} seconds."
                )
            self.redis_client.incr(key)

        except redis.RedisError as e:
            logger.warning(f"Rate limiter unavailable, allowing request: {e}")


# Singleton instance
rate_limiter = RateLimiter()
