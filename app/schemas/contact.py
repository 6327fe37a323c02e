"""Pydantic schemas documenting the contact and health endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ContactRequest(BaseModel):
    """Shape of the JSON body accepted by ``POST /send``.

    Used for OpenAPI documentation only; the raw body is validated by
    ``app.services.contact_validation`` so errors keep the documented format.
    """

    name: str | None = Field(default=None, description="Sender name (optional).")
    email: str | None = Field(default=None, description="Sender email used as Reply-To (optional).")
    message: str = Field(..., description="Message text; must not be blank.")


class SendSuccessResponse(BaseModel):
    success: bool = Field(True, description="Always true on success.")
    message: str = Field(..., description="Human-readable confirmation.")
    messageId: str = Field(..., description="Identifier assigned by the mail relay.")


class ErrorResponse(BaseModel):
    """Error body shared by 400, 413, 429 and 500 responses."""

    error: str = Field(..., description="Error category, e.g. 'Validation failed'.")
    message: str = Field(..., description="Explanation the client can act on.")
    retryAfterSeconds: int | None = Field(
        default=None,
        description="Seconds until the client may retry (429 only).",
    )
    details: str | None = Field(
        default=None,
        description="Transport failure detail (500, non-production only).",
    )


class HealthResponse(BaseModel):
    status: str = Field(..., description="Always 'healthy'.")
    timestamp: str = Field(..., description="Current server time, ISO-8601 UTC.")
