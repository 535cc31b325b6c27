"""Tests for the JSON error formatter."""

import logging
from http import HTTPStatus

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel

from jobly_auth.exceptions import AuthorizationError, ForbiddenError, UnauthorizedError
from jobly_auth.fastapi.errors import (
    INTERNAL_ERROR_MESSAGE,
    VALIDATION_ERROR_MESSAGE,
    error_body,
    install_error_handlers,
)


class Login(BaseModel):
    username: str
    password: str


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    install_error_handlers(app)

    @app.get("/unauthorized")
    async def unauthorized() -> dict:
        raise UnauthorizedError("You need to authenticate before accessing this resource.")

    @app.get("/forbidden")
    async def forbidden() -> dict:
        raise ForbiddenError("You are not allowed to access this resource.")

    @app.get("/custom")
    async def custom() -> dict:
        raise AuthorizationError(429, "Too Many Requests", "Slow down.")

    @app.get("/missing")
    async def missing() -> dict:
        raise HTTPException(status_code=404, detail="Job not found.")

    @app.post("/login")
    async def login(credentials: Login) -> dict:
        return {"username": credentials.username}

    @app.get("/boom")
    async def boom() -> dict:
        raise RuntimeError("database password is hunter2")

    return TestClient(app, raise_server_exceptions=False)


def test_unauthorized_is_rendered(client: TestClient) -> None:
    response = client.get("/unauthorized")

    assert response.status_code == 401
    assert response.json() == {
        "status": 401,
        "title": "Unauthorized",
        "message": "You need to authenticate before accessing this resource.",
    }


def test_forbidden_is_rendered(client: TestClient) -> None:
    response = client.get("/forbidden")

    assert response.status_code == 403
    assert response.json()["message"] == "You are not allowed to access this resource."


def test_custom_authorization_error_keeps_its_status(client: TestClient) -> None:
    response = client.get("/custom")

    assert response.status_code == 429
    assert response.json()["title"] == "Too Many Requests"


def test_http_exception_uses_same_shape(client: TestClient) -> None:
    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json() == {"status": 404, "title": "Not Found", "message": "Job not found."}


def test_unknown_route_uses_same_shape(client: TestClient) -> None:
    response = client.get("/nowhere")

    assert response.status_code == 404
    assert response.json()["title"] == "Not Found"


def test_unhandled_error_hides_details(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.ERROR, logger="jobly_auth.fastapi.errors"):
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {
        "status": 500,
        "title": "Internal Server Error",
        "message": INTERNAL_ERROR_MESSAGE,
    }
    assert "hunter2" not in response.text
    assert any(record.exc_info for record in caplog.records)


def test_validation_error_uses_same_shape(client: TestClient) -> None:
    response = client.post("/login", json={"username": "alice", "password": 12345})

    assert response.status_code == 422
    body = response.json()
    assert set(body) == {"status", "title", "message"}
    assert body["status"] == 422
    assert body["title"] == HTTPStatus(422).phrase
    assert body["message"].startswith(VALIDATION_ERROR_MESSAGE)
    assert "body.password" in body["message"]


def test_validation_error_does_not_echo_input(client: TestClient) -> None:
    response = client.post("/login", json={"username": ["hunter2-secret"]})

    assert response.status_code == 422
    assert "hunter2-secret" not in response.text
    assert "body.password" in response.json()["message"]

class TestErrorBody:
    def test_title_from_status_phrase(self) -> None:
        assert error_body(403, "no")["title"] == "Forbidden"

    def test_unknown_status_gets_generic_title(self) -> None:
        assert error_body(599, "odd") == {"status": 599, "title": "Error", "message": "odd"}
