"""Shared pytest fixtures for jobly-auth tests."""

import os
import time
from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import jwt as pyjwt
import pytest
from starlette.requests import Request

from jobly_auth.config import AuthSettings
from jobly_auth.core.authorizer import Authorizer

SECRET = "test-signing-secret-that-is-long-enough-for-hs256"
OTHER_SECRET = "another-signing-secret-nobody-should-trust-here"


@pytest.fixture
def other_secret() -> str:
    """A secret the application does not trust."""
    return OTHER_SECRET


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run each test without JOBLY_* variables and away from any .env file."""
    for key in list(os.environ):
        if key.upper().startswith("JOBLY_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> AuthSettings:
    """Settings with a known secret, independent of the environment."""
    return AuthSettings(secret_key=SECRET, _env_file=None)


@pytest.fixture
def authorizer(settings: AuthSettings) -> Authorizer:
    return Authorizer(settings)


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Build a signed JWT from arbitrary claims.

    Accepts keyword claims (e.g. ``username="alice"``) plus:
    - secret: signing secret (defaults to SECRET)
    - exp: expiry timestamp, or None to omit it (defaults to one hour ahead)
    - algorithm: signing algorithm (defaults to HS256)
    """

    def _make(
        *,
        secret: str = SECRET,
        exp: int | None | str = "default",
        algorithm: str = "HS256",
        **claims: Any,
    ) -> str:
        payload: dict[str, Any] = dict(claims)
        if exp == "default":
            payload["exp"] = int(time.time()) + 3600
        elif exp is not None:
            payload["exp"] = exp
        return pyjwt.encode(payload, secret, algorithm=algorithm)

    return _make


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Build a Starlette Request carrying a raw token and path parameters.

    Returns a callable that accepts:
    - token: raw value of the authorization header (omitted if None)
    - path_params: route parameters, e.g. {"username": "alice"}
    """

    def _make(token: str | None = None, path_params: dict[str, str] | None = None) -> Request:
        headers: list[tuple[bytes, bytes]] = []
        if token is not None:
            headers.append((b"authorization", token.encode()))
        scope = {
            "type": "http",
            "method": "GET",
            "path": "/test",
            "headers": headers,
            "query_string": b"",
            "path_params": path_params or {},
        }
        return Request(scope)

    return _make


@pytest.fixture
def call_next() -> Any:
    """Terminal handler that records every request it receives."""
    calls: list[Request] = []

    async def _call_next(request: Request) -> str:
        calls.append(request)
        return "forwarded"

    return SimpleNamespace(handler=_call_next, calls=calls)
