"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It sets the environment the settings module needs before any app import.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"

# Required mail relay settings (never contacted: tests stub the transport)
os.environ.setdefault("EMAIL", "portfolio-sender@example.com")
os.environ.setdefault("PASSWORD", "test-password-123")
os.environ.setdefault("RECEIVER_EMAIL", "owner@example.com")
os.environ.setdefault("SMTP_VERIFY_ON_STARTUP", "false")
os.environ["FRONTEND_URL"] = "https://portfolio.example.com/"
os.environ.pop("NODE_ENV", None)

import pytest  # noqa: E402

from app.adapters.mail.base import AbstractMailTransport, OutboundMail  # noqa: E402
from app.core.errors import MailTransportError  # noqa: E402


class StubMailTransport(AbstractMailTransport):
    """Transport double that records messages instead of sending them."""

    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.sent: list[OutboundMail] = []

    async def send(self, mail: OutboundMail) -> str:
        if self.error is not None:
            raise self.error
        self.sent.append(mail)
        return f"<stub-{len(self.sent)}@example.com>"


@pytest.fixture
def stub_transport() -> StubMailTransport:
    return StubMailTransport()


@pytest.fixture
def failing_transport() -> StubMailTransport:
    return StubMailTransport(
        error=MailTransportError(
            code="smtp_unavailable",
            message="Could not reach SMTP relay: Connection refused",
        )
    )


@pytest.fixture
def crashing_transport() -> StubMailTransport:
    return StubMailTransport(error=RuntimeError("boom: internal state"))
