"""Tests for the service error taxonomy and its HTTP mapping."""

import dataclasses

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from sprintboard.errors import (
    ConflictError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    register_error_handlers,
)


@pytest.mark.parametrize(
    ("error", "status_code", "code", "retryable"),
    [
        (InvalidArgumentError("bad"), 400, "invalid_argument", False),
        (PermissionDeniedError("no"), 403, "permission_denied", False),
        (NotFoundError("gone"), 404, "not_found", False),
        (ConflictError("dup"), 409, "conflict", False),
        (InternalError("boom"), 500, "internal", True),
    ],
)
def test_error_attributes(error, status_code, code, retryable):
    assert error.status_code == status_code
    assert error.code == code
    assert error.retryable is retryable
    assert str(error) == error.detail


def test_errors_are_immutable():
    error = NotFoundError("gone")
    with pytest.raises(dataclasses.FrozenInstanceError):
        error.detail = "back"


class _Body(BaseModel):
    take: int


def _app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/missing")
    def missing():
        raise NotFoundError("Project not found")

    @app.get("/broken")
    def broken():
        raise InternalError("Search over ticket failed")

    @app.post("/body")
    def body(payload: _Body):
        return payload

    return app


def test_service_errors_render_code_and_detail():
    client = TestClient(_app())

    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json() == {"code": "not_found", "detail": "Project not found"}


def test_internal_errors_are_logged(caplog):
    client = TestClient(_app())

    response = client.get("/broken")

    assert response.status_code == 500
    assert "request_failed path=/broken code=internal" in caplog.text


def test_request_validation_maps_to_invalid_argument():
    client = TestClient(_app())

    response = client.post("/body", json={"take": "many"})

    assert response.status_code == 400
    assert response.json()["code"] == "invalid_argument"
    assert response.json()["detail"].startswith("take:")
