"""Application factory wiring settings, interceptors, errors and login routes."""

import logging
from collections.abc import Sequence

from fastapi import APIRouter, FastAPI

from jobly_auth.config import AuthSettings, load_settings
from jobly_auth.core.authorizer import Authorizer
from jobly_auth.fastapi.errors import install_error_handlers
from jobly_auth.fastapi.router import CredentialCheck, create_login_router

logger = logging.getLogger(__name__)


def create_app(
    settings: AuthSettings | None = None,
    *,
    authenticate_user: CredentialCheck,
    authenticate_company: CredentialCheck,
    routers: Sequence[APIRouter] = (),
    title: str = "Jobly",
) -> FastAPI:
    """Create a FastAPI application with token authorization installed.

    ``app.state.settings`` and ``app.state.authorizer`` are set so that
    resource routers built later can share the same signing secret.

    Args:
        settings: Authorization settings; loaded from the environment if None.
        authenticate_user: Credential check for ``POST /user-auth``.
        authenticate_company: Credential check for ``POST /company-auth``.
        routers: Additional routers to include (e.g. resource routes).
        title: OpenAPI title.

    Returns:
        The configured FastAPI application.

    Raises:
        ConfigurationError: If settings are omitted and the environment
            does not provide valid ones.
    """
    if settings is None:
        settings = load_settings()

    app = FastAPI(title=title)
    app.state.settings = settings
    app.state.authorizer = Authorizer(settings)

    install_error_handlers(app)
    app.include_router(
        create_login_router(
            settings,
            authenticate_user=authenticate_user,
            authenticate_company=authenticate_company,
        )
    )
    for router in routers:
        app.include_router(router)

    logger.info("Application created", extra={"title": title, "router_count": len(routers) + 1})
    return app
