"""
Tests for error envelopes.
Domain errors, request validation, HTTP errors and the client-side mapping.
"""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field

from core.exceptions import (
    NotFoundError,
    StaleResponseError,
    TalentflowError,
    TransientWriteFailure,
    ValidationFailedError,
    error_for_status,
)
from core.middleware.error_handling import setup_error_handlers


class Payload(BaseModel):
    title: str
    openings: int = Field(ge=1)


@pytest.fixture
def client():
    app = FastAPI()
    setup_error_handlers(app)

    @app.get("/missing")
    async def missing():
        raise NotFoundError("Job not found")

    @app.get("/invalid")
    async def invalid():
        raise ValidationFailedError("Some answers are invalid", errors={"q1": "This field is required"})

    @app.get("/http")
    async def http_error():
        raise HTTPException(status_code=409, detail="Conflict")

    @app.post("/payload")
    async def payload(body: Payload):
        return body

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    return TestClient(app, raise_server_exceptions=False)


class TestErrorEnvelopes:
    def test_not_found(self, client):
        response = client.get("/missing")
        assert response.status_code == 404
        assert response.json() == {"message": "Job not found"}

    def test_validation_failed_carries_errors(self, client):
        response = client.get("/invalid")
        assert response.status_code == 422
        assert response.json() == {
            "message": "Some answers are invalid",
            "errors": {"q1": "This field is required"},
        }

    def test_http_exception(self, client):
        response = client.get("/http")
        assert response.status_code == 409
        assert response.json() == {"message": "Conflict"}

    def test_unknown_route(self, client):
        response = client.get("/nope")
        assert response.status_code == 404
        assert "message" in response.json()

    def test_request_validation(self, client):
        response = client.post("/payload", json={"openings": 0})
        assert response.status_code == 422
        body = response.json()
        assert body["message"] == "Request validation failed"
        assert set(body["errors"]) == {"title", "openings"}

    def test_unexpected_error_is_hidden(self, client):
        response = client.get("/boom")
        assert response.status_code == 500
        assert response.json() == {"message": "An unexpected error occurred"}


class TestErrorTaxonomy:
    @pytest.mark.parametrize("status,cls", [
        (404, NotFoundError),
        (400, ValidationFailedError),
        (422, ValidationFailedError),
        (500, TransientWriteFailure),
        (503, TransientWriteFailure),
    ])
    def test_error_for_status(self, status, cls):
        error = error_for_status(status, "msg", {"f": "bad"})
        assert type(error) is cls
        assert error.message == "msg"
        assert error.errors == {"f": "bad"}

    def test_other_status_keeps_code(self):
        error = error_for_status(409, "Conflict")
        assert type(error) is TalentflowError
        assert error.status_code == 409

    def test_defaults(self):
        assert TransientWriteFailure().to_envelope() == {"message": "Temporary failure"}
        assert StaleResponseError().message
        assert NotFoundError().status_code == 404
