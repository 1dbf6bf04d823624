"""Tests for the central exception handlers."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from qbs.domain.shared.exceptions import (
    ConflictError,
    EntityNotFoundError,
    FieldError,
    ServiceUnavailableError,
    ValidationError,
)
from qbs.presentation.api.exception_handlers import setup_exception_handlers
from qbs_auth import TokenRevokedError


def _app(debug: bool = False) -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app, debug=debug)

    @app.get("/validation")
    async def validation():
        raise ValidationError(errors=[FieldError("email", "Please provide a valid email address")])

    @app.get("/conflict")
    async def conflict():
        raise ConflictError("Already there")

    @app.get("/missing")
    async def missing():
        raise EntityNotFoundError("Nothing here")

    @app.get("/revoked")
    async def revoked():
        raise TokenRevokedError

    @app.get("/unavailable")
    async def unavailable():
        raise ServiceUnavailableError

    @app.get("/boom")
    async def boom():
        msg = "database password is hunter2"
        raise RuntimeError(msg)

    return app


class TestExceptionHandlers:
    def setup_method(self):
        self.client = TestClient(_app(), raise_server_exceptions=False)

    def test_validation_error_lists_fields(self):
        response = self.client.get("/validation")

        assert response.status_code == 400
        assert response.json() == {
            "detail": "Validation failed",
            "code": "VALIDATION_ERROR",
            "errors": [
                {"field": "email", "message": "Please provide a valid email address"},
            ],
        }

    @pytest.mark.parametrize(
        ("path", "status_code"),
        [("/conflict", 409), ("/missing", 404), ("/unavailable", 503)],
    )
    def test_status_mapping(self, path, status_code):
        assert self.client.get(path).status_code == status_code

    def test_401_carries_bearer_challenge(self):
        response = self.client.get("/revoked")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["code"] == "TOKEN_REVOKED"

    def test_unexpected_error_hides_details(self):
        response = self.client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "INTERNAL_ERROR"
        assert body["detail"] == "An internal error occurred"
        assert len(body["error_id"]) == 32
        assert "hunter2" not in response.text

    def test_debug_includes_message(self):
        client = TestClient(_app(debug=True), raise_server_exceptions=False)

        response = client.get("/boom")

        assert response.status_code == 500
        assert "hunter2" in response.json()["message"]
