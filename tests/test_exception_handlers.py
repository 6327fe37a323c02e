"""Tests for global exception handlers.

Validates that errors escaping the contact workflow become consistent
``{error, message}`` JSON bodies without information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.errors import AppError, ConfigurationError, MailTransportError
from app.core.exception_handlers import general_exception_handler, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/transport-error")
    async def transport_error():
        raise MailTransportError(code="smtp_rejected", message="SMTP relay rejected the request: 535")

    @app.get("/config-error")
    async def config_error():
        raise ConfigurationError(code="smtp_tls_conflict", message="TLS options conflict")

    @app.get("/crash")
    async def crash():
        raise RuntimeError("database password=hunter2")

    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


class TestAppErrorHandler:
    def test_transport_error_returns_500(self, client, monkeypatch):
        monkeypatch.setattr(settings.app, "node_env", "production")

        response = client.get("/transport-error")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Email sending failed",
            "message": "Failed to send your message. Please try again later.",
        }

    def test_other_app_errors_are_internal_errors(self, client, monkeypatch):
        monkeypatch.setattr(settings.app, "node_env", None)

        response = client.get("/config-error")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "message": "Something went wrong",
        }

    def test_details_added_in_development(self, client, monkeypatch):
        monkeypatch.setattr(settings.app, "node_env", "development")

        response = client.get("/transport-error")

        assert response.json()["details"] == "SMTP relay rejected the request: 535"


class TestGeneralExceptionHandler:
    def test_unexpected_exception_returns_generic_500(self, client):
        response = client.get("/crash")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "message": "Something went wrong",
        }
        assert "hunter2" not in response.text

    def test_general_exception_handler_never_leaks_stack_trace(self):
        request = AsyncMock()
        request.url.path = "/send"
        request.method = "POST"

        exc = ValueError("Test error with details")
        response = asyncio.run(general_exception_handler(request, exc))

        response_text = bytes(response.body).decode()
        assert response.status_code == 500
        assert "Traceback" not in response_text
        assert "ValueError" not in response_text
        assert json.loads(response_text)["message"] == "Something went wrong"


class TestErrorHandlerIntegration:
    def test_setup_exception_handlers_registers_handlers(self, app_with_handlers: FastAPI):
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers

    def test_multiple_handler_setups_does_not_fail(self):
        app = FastAPI()

        setup_exception_handlers(app)
        setup_exception_handlers(app)

        assert AppError in app.exception_handlers
