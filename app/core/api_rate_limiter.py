"""
Endpoint rate limits, exposed as FastAPI dependencies.

Uploads and AI-backed endpoints are limited per client IP to keep the
exposure to the external AI service's rate limits predictable.
"""

import logging
from fastapi import Request
from app.core.config import settings
from app.core.rate_limiter import rate_limiter

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """
    Extract the client's IP address from the request.

    Handles X-Forwarded-For header for proxied requests.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first (client IP)
        return forwarded_for.split(",")[0].strip()

    return request.client.host if request.client else "unknown"


def check_upload_rate_limit(request: Request) -> None:
    """
    Limit file uploads (job descriptions, resumes, CVs) per client IP.

    Raises:
        HTTPException: 429 if rate limit exceeded
    """
    rate_limiter.check_rate_limit(
        key=f"upload:{get_client_ip(request)}",
        max_requests=settings.UPLOAD_RATE_LIMIT_PER_MINUTE,
        window_seconds=60,
        error_message="Too many uploads. Please wait before uploading more files"
    )


def check_ai_rate_limit(request: Request) -> None:
    """
    Limit AI-only endpoints (CV optimization, section rewrites) per client IP.

    Raises:
        HTTPException: 429 if rate limit exceeded
    """
    rate_limiter.check_rate_limit(
        key=f"ai:{get_client_ip(request)}",
        max_requests=settings.AI_RATE_LIMIT_PER_MINUTE,
        window_seconds=60,
        error_message="AI processing rate limit exceeded. Please wait before sending more requests"
    )
