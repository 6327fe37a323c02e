"""Global exception handlers for consistent error responses.

The contact workflow returns explicit outcomes, so these handlers only see
what escaped it:
- MailTransportError → 500 "Email sending failed"
- Other AppError (e.g., ConfigurationError) → 500 "Internal server error"
- Unexpected Exception → generic 500 (safety net; in the full app the
  request id middleware renders these first, inside the CORS layer)

Bodies follow the API's ``{error, message}`` shape and never include stack
traces. AppError messages are added as ``details`` only when error detail
exposure is enabled (NODE_ENV=development).
"""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.errors import AppError, MailTransportError
from app.core.logging import get_request_id

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {
    "error": "Internal server error",
    "message": "Something went wrong",
}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors that escaped the request workflow.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with status 500 and a client-safe body.
    """
    logger.error(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_msg": exc.message,
            "error_type": type(exc).__name__,
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )

    if isinstance(exc, MailTransportError):
        content = {
            "error": "Email sending failed",
            "message": "Failed to send your message. Please try again later.",
        }
    else:
        content = dict(INTERNAL_ERROR_BODY)

    if settings.app.expose_error_details:
        content["details"] = exc.message

    return JSONResponse(status_code=500, content=content)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Catches any exception not handled by specific handlers.
    Logs detailed information for debugging while returning generic message.
    Prevents information leakage (no stack traces to client).

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with generic error (no implementation details leaked).
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(status_code=500, content=dict(INTERNAL_ERROR_BODY))


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.

    Example:
        >>> from fastapi import FastAPI
        >>> from app.core.exception_handlers import setup_exception_handlers
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
