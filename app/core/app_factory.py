"""Application factory for the contact relay API.

Centralizes app construction (metadata, middleware, handlers, routers,
startup checks) so tests and the entrypoint build the same app.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.adapters.mail.factory import get_mail_transport
from app.api.routes import contact_router, health_router
from app.core.config import settings
from app.core.errors import MailTransportError
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware

logger = logging.getLogger(__name__)


async def verify_mail_relay() -> bool:
    """Log in to the SMTP relay once and log whether it is usable.

    Failures are logged, not raised: the relay may recover before the first
    submission arrives.

    Returns:
        True if the relay accepted the connection and credentials.
    """
    try:
        transport = get_mail_transport()
        await transport.verify()
    except MailTransportError as exc:
        logger.error(
            "mail.relay_unavailable",
            extra={"error_code": exc.code, "error_msg": exc.message},
        )
        return False

    logger.info(
        "mail.relay_ready",
        extra={"smtp_host": settings.mail.smtp_host, "smtp_port": settings.mail.smtp_port},
    )
    return True


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(
        "service.startup",
        extra={
            "environment": settings.app.environment,
            "port": settings.app.port,
            "allowed_origin": settings.app.frontend_url,
        },
    )
    if settings.mail.smtp_verify_on_startup:
        await verify_mail_relay()
    yield
    logger.info("service.shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Contact Relay API",
        description=(
            "Accepts contact form submissions and relays them by email through "
            "an authenticated SMTP provider. Submissions are rate limited per "
            "client address."
        ),
        version="1.0.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Contact", "description": "Contact form submission."},
            {"name": "Health", "description": "Liveness check."},
        ],
    )

    # Middleware (last added runs first: CORS wraps request id handling)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.app.frontend_url],
        allow_methods=["POST"],
        allow_headers=["Content-Type"],
    )

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(contact_router)
    app.include_router(health_router)

    return app
