"""Rate limiting wiring for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: routes depend on ``get_rate_limiter`` only.
- Swap-friendly: storage backend can be replaced (e.g., Redis) behind an
  abstract interface.

Rate limiting strategy:
- Fixed window per client, keyed by the direct peer address.
- Forwarded headers (X-Forwarded-For and friends) are not trusted.
"""

from __future__ import annotations

import hashlib

from fastapi import Request

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.core.config import settings


_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple[int, int, int] | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return a process-wide rate limiter instance.

    The instance is cached in-module to preserve state across requests.
    If configuration changes (primarily in tests), the limiter is rebuilt.

    Returns:
        AbstractRateLimiter: Configured limiter instance.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.rate_limit_requests,
        settings.app.rate_limit_window_seconds,
        settings.app.rate_limit_max_clients,
    )

    if _limiter is None or _limiter_config != config:
        _limiter = InMemoryFixedWindowRateLimiter(
            limit=settings.app.rate_limit_requests,
            window_seconds=settings.app.rate_limit_window_seconds,
            max_clients=settings.app.rate_limit_max_clients,
        )
        _limiter_config = config

    return _limiter


def client_identifier(request: Request) -> str:
    """Return the coarse client address used to key rate limit state."""

    return request.client.host if request.client and request.client.host else "unknown"


def hash_client_identifier(identifier: str) -> str:
    """Hash the client identifier for logging without exposing addresses."""
    return hashlib.sha256(identifier.encode()).hexdigest()[:16]
