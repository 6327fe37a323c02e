"""Map submission outcomes to HTTP responses.

This is the only place where contact workflow results become status codes
and JSON bodies:
- SENT → 200
- BAD_REQUEST / VALIDATION_FAILED → 400
- PAYLOAD_TOO_LARGE → 413
- RATE_LIMITED → 429 (with Retry-After and X-RateLimit-* when enabled)
- SEND_FAILED → 500 (transport detail only when exposure is enabled)
"""

from __future__ import annotations

from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from app.services.contact_service import OutcomeKind, SubmissionOutcome

SEND_SUCCESS_MESSAGE = "Message sent successfully"
SEND_FAILED_MESSAGE = "Failed to send your message. Please try again later."


def render_outcome(
    outcome: SubmissionOutcome,
    *,
    expose_error_details: bool = False,
    include_rate_limit_headers: bool = True,
) -> JSONResponse:
    """Build the JSON response for a submission outcome.

    Args:
        outcome: Terminal state of the submission.
        expose_error_details: Include transport failure detail in 500 bodies.
        include_rate_limit_headers: Add Retry-After and X-RateLimit-* to 429 responses.

    Returns:
        JSONResponse with the status code and body for the outcome.
    """
    if outcome.kind is OutcomeKind.SENT:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={
                "success": True,
                "message": SEND_SUCCESS_MESSAGE,
                "messageId": outcome.message_id,
            },
        )

    if outcome.kind in (OutcomeKind.BAD_REQUEST, OutcomeKind.VALIDATION_FAILED):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Validation failed", "message": outcome.reason},
        )

    if outcome.kind is OutcomeKind.PAYLOAD_TOO_LARGE:
        return JSONResponse(
            status_code=413,
            content={"error": "Payload too large", "message": outcome.reason},
        )

    if outcome.kind is OutcomeKind.RATE_LIMITED:
        retry_after = outcome.retry_after_seconds or 0
        headers: dict[str, str] = {}
        if include_rate_limit_headers:
            headers["Retry-After"] = str(retry_after)
            if outcome.rate_limit is not None:
                headers["X-RateLimit-Limit"] = str(outcome.rate_limit.limit)
                headers["X-RateLimit-Remaining"] = str(outcome.rate_limit.remaining)
                headers["X-RateLimit-Reset"] = str(outcome.rate_limit.reset_at)
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={
                "error": "Too many requests",
                "message": f"Please try again in {retry_after} seconds",
                "retryAfterSeconds": retry_after,
            },
            headers=headers or None,
        )

    content: dict[str, Any] = {
        "error": "Email sending failed",
        "message": SEND_FAILED_MESSAGE,
    }
    if expose_error_details and outcome.error_detail:
        content["details"] = outcome.error_detail
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)
