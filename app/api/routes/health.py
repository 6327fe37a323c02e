from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from app.schemas.contact import HealthResponse

router = APIRouter(tags=["Health"])


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""

    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint.

    Liveness probe only: no dependency (SMTP relay) is checked, so it stays
    fast and always reports healthy while the process is serving requests.

    Returns:
        HealthResponse: Fixed "healthy" status and the current timestamp.
    """

    return HealthResponse(status="healthy", timestamp=utc_timestamp())
