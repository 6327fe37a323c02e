"""Contact submission workflow.

Runs one submission through body parsing, the rate limit gate, validation,
mail composition and delivery. Every stage reports its result explicitly and
the whole run ends in a single ``SubmissionOutcome``; turning that into an
HTTP response happens once, in ``app.api.responses``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.adapters.mail.base import AbstractMailTransport
from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.core.errors import MailTransportError
from app.core.rate_limit import hash_client_identifier
from app.services.contact_validation import ValidationFailure, validate_contact_payload
from app.services.mail_composer import compose_outbound_mail

logger = logging.getLogger(__name__)


class OutcomeKind(str, Enum):
    SENT = "sent"
    BAD_REQUEST = "bad_request"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    RATE_LIMITED = "rate_limited"
    VALIDATION_FAILED = "validation_failed"
    SEND_FAILED = "send_failed"


@dataclass(frozen=True)
class SubmissionOutcome:
    """Terminal state of one submission.

    Attributes:
        kind: Which terminal state was reached.
        message_id: Transport message id (SENT only).
        reason: Client-facing explanation (BAD_REQUEST, PAYLOAD_TOO_LARGE,
            VALIDATION_FAILED).
        retry_after_seconds: Wait time before retrying (RATE_LIMITED only).
        rate_limit: Limiter decision behind a RATE_LIMITED outcome.
        error_detail: Transport failure detail (SEND_FAILED only); shown to
            clients only outside production.
    """

    kind: OutcomeKind
    message_id: str | None = None
    reason: str | None = None
    retry_after_seconds: int | None = None
    rate_limit: RateLimitResult | None = None
    error_detail: str | None = None


class _BodyError(Exception):
    def __init__(self, kind: OutcomeKind, reason: str) -> None:
        super().__init__(reason)
        self.kind = kind
        self.reason = reason


class ContactService:
    """Relay contact form submissions to the configured mailbox."""

    def __init__(
        self,
        *,
        rate_limiter: AbstractRateLimiter,
        transport: AbstractMailTransport,
        sender_address: str,
        receiver_address: str,
        sender_name: str = "Portfolio Contact",
        anonymous_reply_to: str = "anonymous@portfolio.com",
        max_body_bytes: int = 100 * 1024,
        send_timeout_seconds: float = 20.0,
    ) -> None:
        self.rate_limiter = rate_limiter
        self.transport = transport
        self.sender_address = sender_address
        self.receiver_address = receiver_address
        self.sender_name = sender_name
        self.anonymous_reply_to = anonymous_reply_to
        self.max_body_bytes = max_body_bytes
        self.send_timeout_seconds = send_timeout_seconds

    def _parse_body(self, raw_body: bytes) -> Any:
        if len(raw_body) > self.max_body_bytes:
            raise _BodyError(
                OutcomeKind.PAYLOAD_TOO_LARGE,
                f"Request body exceeds {self.max_body_bytes} bytes",
            )
        if not raw_body.strip():
            return {}
        try:
            return json.loads(raw_body)
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            raise _BodyError(OutcomeKind.BAD_REQUEST, "Invalid JSON body") from exc

    async def submit(self, *, client_id: str, raw_body: bytes) -> SubmissionOutcome:
        """Process one submission.

        Args:
            client_id: Coarse client address used for rate limiting.
            raw_body: Raw request body.

        Returns:
            SubmissionOutcome describing the terminal state.
        """
        client_hash = hash_client_identifier(client_id)

        try:
            payload = self._parse_body(raw_body)
        except _BodyError as exc:
            logger.info(
                "contact.rejected_body",
                extra={"client_hash": client_hash, "reason": exc.kind.value, "body_bytes": len(raw_body)},
            )
            return SubmissionOutcome(kind=exc.kind, reason=exc.reason)

        admission = self.rate_limiter.admit(client_id)
        if not admission.allowed:
            retry_after = admission.retry_after_seconds or 0
            logger.warning(
                "rate_limit.exceeded",
                extra={
                    "client_hash": client_hash,
                    "limit": admission.limit,
                    "retry_after_s": retry_after,
                },
            )
            return SubmissionOutcome(
                kind=OutcomeKind.RATE_LIMITED,
                retry_after_seconds=retry_after,
                rate_limit=admission,
            )

        logger.debug(
            "rate_limit.allowed",
            extra={"client_hash": client_hash, "remaining": admission.remaining},
        )

        result = validate_contact_payload(payload)
        if isinstance(result, ValidationFailure):
            logger.info(
                "contact.validation_failed",
                extra={"client_hash": client_hash, "reason": result.reason.name.lower()},
            )
            return SubmissionOutcome(kind=OutcomeKind.VALIDATION_FAILED, reason=result.message)

        logger.info(
            "contact.received",
            extra={
                "client_hash": client_hash,
                "has_name": bool(result.name),
                "has_email": result.has_email,
                "message_chars": len(result.message),
            },
        )

        mail = compose_outbound_mail(
            result,
            sender_address=self.sender_address,
            receiver_address=self.receiver_address,
            sender_name=self.sender_name,
            anonymous_reply_to=self.anonymous_reply_to,
        )

        try:
            message_id = await asyncio.wait_for(
                self.transport.send(mail),
                timeout=self.send_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(
                "mail.send_failed",
                extra={"client_hash": client_hash, "error_code": "send_timeout"},
            )
            return SubmissionOutcome(
                kind=OutcomeKind.SEND_FAILED,
                error_detail=f"Mail transport did not finish within {self.send_timeout_seconds}s",
            )
        except MailTransportError as exc:
            logger.error(
                "mail.send_failed",
                extra={"client_hash": client_hash, "error_code": exc.code, "error_msg": exc.message},
            )
            return SubmissionOutcome(kind=OutcomeKind.SEND_FAILED, error_detail=exc.message)

        logger.info("mail.sent", extra={"client_hash": client_hash, "message_id": message_id})
        return SubmissionOutcome(kind=OutcomeKind.SENT, message_id=message_id)
