"""Factory for the mail transport used by the contact endpoint."""

from __future__ import annotations

from app.adapters.mail.base import AbstractMailTransport
from app.adapters.mail.smtp_client import SMTPMailTransport
from app.core.config import MailSettings, settings

_transport: AbstractMailTransport | None = None


def create_mail_transport(mail_settings: MailSettings | None = None) -> AbstractMailTransport:
    """Instantiate the SMTP transport from configuration.

    TLS options are already checked for consistency when settings load.

    Args:
        mail_settings: Mail settings; defaults to the global settings.

    Returns:
        AbstractMailTransport: Configured transport.
    """
    cfg = mail_settings or settings.mail

    return SMTPMailTransport(
        hostname=cfg.smtp_host,
        port=cfg.smtp_port,
        username=cfg.email,
        password=cfg.password,
        use_tls=cfg.smtp_use_tls,
        start_tls=cfg.smtp_start_tls,
        timeout_seconds=cfg.smtp_timeout_seconds,
    )


def get_mail_transport() -> AbstractMailTransport:
    """Return the process-wide transport, creating it on first use."""

    global _transport

    if _transport is None:
        _transport = create_mail_transport()
    return _transport
