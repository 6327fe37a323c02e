"""SMTP mail transport adapter."""

from __future__ import annotations

import asyncio
import logging
from email.message import EmailMessage
from email.utils import make_msgid

import aiosmtplib

from app.adapters.mail.base import AbstractMailTransport, OutboundMail
from app.core.errors import MailTransportError

logger = logging.getLogger(__name__)


class SMTPMailTransport(AbstractMailTransport):
    """Deliver mail through an authenticated SMTP relay.

    Uses aiosmtplib so a slow relay never blocks the event loop.
    """

    def __init__(
        self,
        *,
        hostname: str,
        port: int,
        username: str,
        password: str,
        use_tls: bool = True,
        start_tls: bool = False,
        timeout_seconds: float = 20.0,
    ) -> None:
        """Initialize the SMTP transport.

        Args:
            hostname: SMTP relay hostname.
            port: SMTP relay port.
            username: Login for the relay.
            password: Credential for the relay.
            use_tls: Connect with implicit TLS.
            start_tls: Upgrade the connection with STARTTLS.
            timeout_seconds: Bound for each SMTP operation and for the whole send.
        """
        self.hostname = hostname
        self.port = port
        self._username = username
        self._password = password
        self.use_tls = use_tls
        self.start_tls = start_tls
        self.timeout_seconds = timeout_seconds

    def build_message(self, mail: OutboundMail) -> EmailMessage:
        """Render an OutboundMail as a multipart/alternative EmailMessage."""
        message = EmailMessage()
        message["From"] = mail.sender
        message["To"] = mail.to
        message["Reply-To"] = mail.reply_to
        message["Subject"] = mail.subject
        message["Message-ID"] = make_msgid(domain=self._message_id_domain())
        message.set_content(mail.text_body)
        message.add_alternative(mail.html_body, subtype="html")
        return message

    def _message_id_domain(self) -> str | None:
        _, _, domain = self._username.rpartition("@")
        return domain or None

    async def send(self, mail: OutboundMail) -> str:
        """Send a message through the relay.

        Args:
            mail: Composed message to deliver.

        Returns:
            str: The Message-ID header of the delivered message.

        Raises:
            MailTransportError: On timeout, SMTP errors, or connection failures.
        """
        message = self.build_message(mail)
        message_id = message["Message-ID"]

        try:
            await asyncio.wait_for(
                aiosmtplib.send(
                    message,
                    hostname=self.hostname,
                    port=self.port,
                    username=self._username,
                    password=self._password,
                    use_tls=self.use_tls,
                    start_tls=self.start_tls,
                    timeout=self.timeout_seconds,
                ),
                timeout=self.timeout_seconds,
            )
        except (asyncio.TimeoutError, aiosmtplib.SMTPException, OSError) as exc:
            raise self._to_transport_error(exc) from exc

        logger.debug("smtp.sent", extra={"smtp_host": self.hostname})
        return message_id

    async def verify(self) -> None:
        """Connect and log in once, then disconnect.

        Raises:
            MailTransportError: If the relay cannot be reached or rejects login.
        """
        client = aiosmtplib.SMTP(
            hostname=self.hostname,
            port=self.port,
            use_tls=self.use_tls,
            start_tls=self.start_tls,
            timeout=self.timeout_seconds,
        )
        try:
            async with client:
                await client.login(self._username, self._password)
        except (asyncio.TimeoutError, aiosmtplib.SMTPException, OSError) as exc:
            raise self._to_transport_error(exc) from exc

    def _to_transport_error(self, exc: Exception) -> MailTransportError:
        """Map aiosmtplib/network failures to MailTransportError."""
        if isinstance(exc, (asyncio.TimeoutError, aiosmtplib.SMTPTimeoutError)):
            return MailTransportError(
                code="smtp_timeout",
                message=f"SMTP relay did not respond within {self.timeout_seconds}s",
                details={"timeout_seconds": self.timeout_seconds},
            )
        if isinstance(exc, aiosmtplib.SMTPResponseException):
            return MailTransportError(
                code="smtp_rejected",
                message=f"SMTP relay rejected the request: {exc.code} {exc.message}",
                details={"smtp_code": exc.code, "error_type": type(exc).__name__},
            )
        return MailTransportError(
            code="smtp_unavailable",
            message=f"Could not reach SMTP relay: {exc}",
            details={"error_type": type(exc).__name__},
        )
