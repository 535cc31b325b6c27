"""Shared fixtures for integration tests.

Builds a small job-board app on top of create_app():
    POST   /user-auth, /company-auth     # login, issues tokens
    GET    /users                        # any valid token
    GET    /me                           # users only
    PATCH  /users/{username}             # the user themself
    DELETE /users/{username}             # the user themself
    POST   /jobs                         # companies only
    PATCH  /companies/{handle}           # the company itself
    POST   /jobs/{job_id}/applications   # users only
"""

from typing import Any

import pytest
from fastapi import APIRouter, FastAPI, Request
from fastapi.testclient import TestClient

from jobly_auth.config import AuthSettings
from jobly_auth.core.authorizer import Authorizer
from jobly_auth.core.middleware import route
from jobly_auth.fastapi.app import create_app
from jobly_auth.fastapi.router import add_route

USER_PASSWORDS = {"alice": "wonderland", "bob": "builder"}
COMPANY_PASSWORDS = {"acme": "anvils", "globex": "hank"}


def _check_user(username: str, password: str) -> bool:
    return USER_PASSWORDS.get(username) == password


async def _check_company(handle: str, password: str) -> bool:
    return COMPANY_PASSWORDS.get(handle) == password


def build_resource_router(authorizer: Authorizer) -> APIRouter:
    router = APIRouter()

    async def list_users(request: Request) -> dict:
        return {"users": sorted(USER_PASSWORDS), "token": dict(request.state.decoded_token)}

    async def me(request: Request) -> dict:
        return {"username": request.state.username}

    class patch_user(route):  # noqa: N801
        middleware = [authorizer.require_correct_user]
        tags = ["users"]

        async def handler(username: str, body: dict[str, Any]) -> dict:
            return {"username": username, **body}

    class delete_user(route):  # noqa: N801
        middleware = [authorizer.require_correct_user]
        status_code = 200

        async def handler(username: str) -> dict:
            return {"deleted": username}

    class create_job(route):  # noqa: N801
        middleware = [authorizer.require_company_authorization]

        async def handler(request: Request, body: dict[str, Any]) -> dict:
            return {"company": request.state.company, **body}

    class patch_company(route):  # noqa: N801
        middleware = [authorizer.require_correct_company]

        async def handler(handle: str, body: dict[str, Any]) -> dict:
            return {"handle": handle, **body}

    class apply(route):  # noqa: N801
        middleware = [authorizer.require_user_authorization]

        async def handler(job_id: int, request: Request) -> dict:
            return {"job_id": job_id, "username": request.state.username}

    add_route(router, "/users", "get", list_users, middleware=[authorizer.require_authorization])
    add_route(router, "/me", "get", me, middleware=[authorizer.require_user_authorization])
    add_route(router, "/users/{username}", "patch", patch_user)
    add_route(router, "/users/{username}", "delete", delete_user)
    add_route(router, "/jobs", "post", create_job)
    add_route(router, "/companies/{handle}", "patch", patch_company)
    add_route(router, "/jobs/{job_id}/applications", "post", apply)
    return router


@pytest.fixture
def app(settings: AuthSettings) -> FastAPI:
    authorizer = Authorizer(settings)
    return create_app(
        settings,
        authenticate_user=_check_user,
        authenticate_company=_check_company,
        routers=[build_resource_router(authorizer)],
    )


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def user_token(client: TestClient) -> str:
    response = client.post("/user-auth", json={"username": "alice", "password": "wonderland"})
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def company_token(client: TestClient) -> str:
    response = client.post("/company-auth", json={"handle": "acme", "password": "anvils"})
    assert response.status_code == 200
    return response.json()["token"]
