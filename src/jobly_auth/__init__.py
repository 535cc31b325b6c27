"""JWT authorization interceptors for the Jobly API."""

# Configuration
from jobly_auth.config import AuthSettings, load_settings

# Interceptors: the main entry point
from jobly_auth.core.authorizer import Authorizer

# Claims and tokens
from jobly_auth.core.claims import Claim, CompanyClaim, UserClaim, decode_claim

# Middleware chain API
from jobly_auth.core.middleware import RouteConfig, build_middleware_chain, route
from jobly_auth.core.tokens import (
    Rejected,
    RejectionReason,
    TokenResult,
    Verified,
    issue_token,
    verify_token,
)

# Exceptions
from jobly_auth.exceptions import (
    AuthorizationError,
    ConfigurationError,
    ForbiddenError,
    JoblyAuthError,
    MiddlewareValidationError,
    UnauthorizedError,
)

# FastAPI integration
from jobly_auth.fastapi import add_route, create_app, create_login_router, install_error_handlers

__all__ = [
    # Interceptors
    "Authorizer",
    # Configuration
    "AuthSettings",
    "load_settings",
    # Claims and tokens
    "Claim",
    "CompanyClaim",
    "UserClaim",
    "decode_claim",
    "Rejected",
    "RejectionReason",
    "TokenResult",
    "Verified",
    "issue_token",
    "verify_token",
    # Middleware chain API
    "RouteConfig",
    "build_middleware_chain",
    "route",
    # FastAPI integration
    "add_route",
    "create_app",
    "create_login_router",
    "install_error_handlers",
    # Exceptions
    "AuthorizationError",
    "ConfigurationError",
    "ForbiddenError",
    "JoblyAuthError",
    "MiddlewareValidationError",
    "UnauthorizedError",
]

__version__ = "1.0.0"
