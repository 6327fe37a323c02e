from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.adapters.mail.base import AbstractMailTransport
from app.adapters.mail.factory import get_mail_transport
from app.adapters.rate_limit.base import AbstractRateLimiter
from app.api.responses import render_outcome
from app.core.config import settings
from app.core.rate_limit import client_identifier, get_rate_limiter
from app.schemas.contact import ContactRequest, ErrorResponse, SendSuccessResponse
from app.services.contact_service import ContactService

router = APIRouter(tags=["Contact"])


def get_contact_service(
    rate_limiter: AbstractRateLimiter = Depends(get_rate_limiter),
    transport: AbstractMailTransport = Depends(get_mail_transport),
) -> ContactService:
    """Build the contact workflow from the shared limiter and transport."""

    return ContactService(
        rate_limiter=rate_limiter,
        transport=transport,
        sender_address=settings.mail.email,
        receiver_address=settings.mail.receiver_email,
        sender_name=settings.mail.sender_name,
        anonymous_reply_to=settings.mail.anonymous_reply_to,
        max_body_bytes=settings.app.max_body_bytes,
        send_timeout_seconds=settings.mail.smtp_timeout_seconds,
    )


@router.post(
    "/send",
    response_model=SendSuccessResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed body, empty message or invalid email"},
        413: {"model": ErrorResponse, "description": "Request body too large"},
        429: {"model": ErrorResponse, "description": "Too many submissions from this client"},
        500: {"model": ErrorResponse, "description": "Email could not be sent"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ContactRequest.model_json_schema()}},
        }
    },
)
async def send_message(
    request: Request,
    service: ContactService = Depends(get_contact_service),
) -> JSONResponse:
    """Relay a contact form submission by email.

    The raw body is read here rather than declared as a model so that
    malformed JSON, empty messages and bad emails all produce the documented
    ``{error, message}`` body instead of FastAPI's 422 format.

    Args:
        request: Incoming request (body and client address).
        service: Contact workflow (injected).

    Returns:
        JSONResponse: 200 with the message id, or the error response for the
            terminal state reached.
    """
    raw_body = await request.body()
    outcome = await service.submit(client_id=client_identifier(request), raw_body=raw_body)
    return render_outcome(
        outcome,
        expose_error_details=settings.app.expose_error_details,
        include_rate_limit_headers=settings.app.rate_limit_include_headers,
    )
