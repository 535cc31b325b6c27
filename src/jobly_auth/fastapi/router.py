"""Route registration with authorization interceptors, and the login routes.

Interceptors run inside the route, after FastAPI has matched the path, so
``request.path_params`` is populated when ownership checks compare it to
the token's claim.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from fastapi import APIRouter
from fastapi.routing import APIRoute
from pydantic import BaseModel

from jobly_auth.config import AuthSettings
from jobly_auth.core.claims import CompanyClaim, UserClaim
from jobly_auth.core.middleware import (
    Interceptor,
    RouteConfig,
    build_middleware_chain,
    normalize_middleware,
)
from jobly_auth.core.tokens import issue_token
from jobly_auth.exceptions import MiddlewareValidationError, UnauthorizedError

logger = logging.getLogger(__name__)

HTTP_METHODS = frozenset({"get", "post", "put", "patch", "delete", "head", "options"})

# Convention-based default status codes by HTTP method
DEFAULT_STATUS_CODES: dict[str, int] = {
    "post": 201,  # Created
    "delete": 204,  # No Content
}

CredentialCheck = Callable[[str, str], bool | Awaitable[bool]]


def add_route(
    router: APIRouter,
    path: str,
    method: str,
    handler: Callable[..., Any] | RouteConfig,
    *,
    middleware: Sequence[Interceptor] = (),
    tags: list[str] | None = None,
    summary: str | None = None,
    status_code: int | None = None,
) -> None:
    """Register a handler on the router behind an interceptor chain.

    Router-level ``middleware`` runs first, followed by the handler's own
    middleware when ``handler`` is a RouteConfig (``class get(route): ...``).

    Args:
        router: The APIRouter to register the route on.
        path: URL path, e.g. ``/users/{username}``.
        method: HTTP method name (case-insensitive).
        handler: Endpoint function or RouteConfig.
        middleware: Interceptors applied before the handler's own.
        tags: OpenAPI tags (RouteConfig tags take precedence).
        summary: OpenAPI summary (RouteConfig summary takes precedence).
        status_code: Success status code; defaults to 201 for POST and
            204 for DELETE.

    Raises:
        MiddlewareValidationError: If the method is unknown or any
            interceptor is not an async callable.
    """
    method = method.lower()
    if method not in HTTP_METHODS:
        raise MiddlewareValidationError(f"Unsupported HTTP method {method.upper()} for {path}")

    endpoint: Callable[..., Any] = handler
    handler_mw: tuple[Interceptor, ...] = ()
    if isinstance(handler, RouteConfig):
        endpoint = handler.handler
        handler_mw = tuple(handler.middleware)
        if handler.tags is not None:
            tags = list(handler.tags)
        if handler.summary is not None:
            summary = handler.summary
        if handler.status_code is not None:
            status_code = handler.status_code

    full_middleware = (
        *normalize_middleware(list(middleware), source=f"{method.upper()} {path}"),
        *handler_mw,
    )

    kwargs: dict[str, Any] = {"description": endpoint.__doc__}
    if tags is not None:
        kwargs["tags"] = tags
    if summary is not None:
        kwargs["summary"] = summary
    resolved_status = status_code if status_code is not None else DEFAULT_STATUS_CODES.get(method)
    if resolved_status is not None:
        kwargs["status_code"] = resolved_status
    if full_middleware:
        kwargs["route_class_override"] = _make_middleware_route(full_middleware)

    router.add_api_route(path=path, endpoint=endpoint, methods=[method.upper()], **kwargs)

    logger.debug(
        "Registered route",
        extra={
            "method": method.upper(),
            "path": path,
            "middleware_count": len(full_middleware),
        },
    )


def _make_middleware_route(
    middleware_stack: Sequence[Interceptor],
) -> type[APIRoute]:
    """Create an APIRoute subclass that runs the interceptors before the handler.

    The wrapping happens in get_route_handler(), so the interceptors see the
    routed request, including its path parameters.
    """

    class MiddlewareRoute(APIRoute):
        def get_route_handler(self) -> Callable[..., Any]:
            original_handler = super().get_route_handler()
            return build_middleware_chain(original_handler, middleware_stack)

    return MiddlewareRoute


class UserCredentials(BaseModel):
    username: str
    password: str


class CompanyCredentials(BaseModel):
    handle: str
    password: str


class TokenResponse(BaseModel):
    token: str


async def _check(check: CredentialCheck, identity: str, password: str) -> bool:
    result = check(identity, password)
    if inspect.isawaitable(result):
        result = await result
    return bool(result)


def create_login_router(
    settings: AuthSettings,
    *,
    authenticate_user: CredentialCheck,
    authenticate_company: CredentialCheck,
) -> APIRouter:
    """Create the login routes that issue tokens.

    ``POST /user-auth`` issues a user token and ``POST /company-auth`` a
    company token. Checking the password is up to the injected callables,
    which may be sync or async and return True for valid credentials.

    Args:
        settings: Settings used to sign the issued tokens.
        authenticate_user: ``(username, password) -> bool``.
        authenticate_company: ``(handle, password) -> bool``.

    Returns:
        An APIRouter with both login routes.
    """
    router = APIRouter(tags=["auth"])

    @router.post("/user-auth", response_model=TokenResponse)
    async def user_auth(credentials: UserCredentials) -> TokenResponse:
        """Log in as a user and receive a token."""
        if not await _check(authenticate_user, credentials.username, credentials.password):
            logger.info("User login failed", extra={"username": credentials.username})
            raise UnauthorizedError("Invalid username or password.")
        token = issue_token(UserClaim(username=credentials.username), settings)
        return TokenResponse(token=token)

    @router.post("/company-auth", response_model=TokenResponse)
    async def company_auth(credentials: CompanyCredentials) -> TokenResponse:
        """Log in as a company and receive a token."""
        if not await _check(authenticate_company, credentials.handle, credentials.password):
            logger.info("Company login failed", extra={"handle": credentials.handle})
            raise UnauthorizedError("Invalid handle or password.")
        token = issue_token(CompanyClaim(handle=credentials.handle), settings)
        return TokenResponse(token=token)

    return router
