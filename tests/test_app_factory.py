from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from app.core import app_factory
from app.core.errors import MailTransportError


@pytest.mark.asyncio
async def test_verify_mail_relay_reports_ready():
    transport = AsyncMock()
    with patch.object(app_factory, "get_mail_transport", return_value=transport):
        assert await app_factory.verify_mail_relay() is True

    transport.verify.assert_awaited_once()


@pytest.mark.asyncio
async def test_verify_mail_relay_logs_instead_of_raising():
    transport = AsyncMock()
    transport.verify.side_effect = MailTransportError(
        code="smtp_rejected", message="SMTP relay rejected the request (535)"
    )
    with patch.object(app_factory, "get_mail_transport", return_value=transport):
        assert await app_factory.verify_mail_relay() is False


def test_startup_verification_runs_when_enabled(monkeypatch):
    monkeypatch.setattr(app_factory.settings.mail, "smtp_verify_on_startup", True)
    verify = AsyncMock(return_value=False)

    with patch.object(app_factory, "verify_mail_relay", verify):
        with TestClient(app_factory.create_app()) as client:
            assert client.get("/health").status_code == 200

    verify.assert_awaited_once()


def test_startup_verification_skipped_when_disabled(monkeypatch):
    monkeypatch.setattr(app_factory.settings.mail, "smtp_verify_on_startup", False)
    verify = AsyncMock(return_value=True)

    with patch.object(app_factory, "verify_mail_relay", verify):
        with TestClient(app_factory.create_app()):
            pass

    verify.assert_not_awaited()
