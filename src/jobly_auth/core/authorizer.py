"""Authorization interceptors.

Each interceptor verifies the raw token from the request header and either
forwards the request (annotating ``request.state``) or raises an
AuthorizationError for the error formatter to render.

Request annotations:
    decoded_token: read-only decoded payload (require_authorization)
    claim: typed UserClaim/CompanyClaim (require_authorization)
    username: caller's username (require_user_authorization)
    company: caller's company handle (require_company_authorization)
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.requests import Request

from jobly_auth.config import AuthSettings
from jobly_auth.core.claims import CompanyClaim, UserClaim
from jobly_auth.core.tokens import Rejected, TokenResult, Verified, verify_token
from jobly_auth.exceptions import AuthorizationError, ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Any]]

AUTHENTICATE_MESSAGE = "You need to authenticate before accessing this resource."
USERS_ONLY_MESSAGE = "Only users can access this resource."
COMPANIES_ONLY_MESSAGE = "Only companies can access this resource."
FORBIDDEN_MESSAGE = "You are not allowed to access this resource."


class Authorizer:
    """Token-gated interceptors bound to one set of settings.

    Args:
        settings: Shared signing configuration.
        user_param: Path parameter naming the target user.
        company_param: Path parameter naming the target company.

    Example:
        authorizer = Authorizer(load_settings())

        class get(route):
            middleware = [authorizer.require_user_authorization]

            async def handler(request: Request) -> dict:
                return {"me": request.state.username}
    """

    def __init__(
        self,
        settings: AuthSettings,
        *,
        user_param: str = "username",
        company_param: str = "handle",
    ) -> None:
        self.settings = settings
        self.user_param = user_param
        self.company_param = company_param

    def verify(self, request: Request) -> TokenResult:
        """Verify the token carried by the request."""
        token = request.headers.get(self.settings.token_header)
        return verify_token(token, self.settings)

    async def require_authorization(self, request: Request, call_next: CallNext) -> Any:
        """Accept any valid token and attach the decoded claim."""
        result = self.verify(request)
        if not isinstance(result, Verified):
            raise self._rejected(
                request, "require_authorization", result, UnauthorizedError(AUTHENTICATE_MESSAGE)
            )

        request.state.decoded_token = result.payload
        request.state.claim = result.claim
        return await call_next(request)

    async def require_user_authorization(self, request: Request, call_next: CallNext) -> Any:
        """Accept only user tokens and attach ``username``.

        A company token verifies but carries no username, so it is rejected
        with the same 401 as an invalid token.
        """
        result = self.verify(request)
        if not isinstance(result, Verified) or not isinstance(result.claim, UserClaim):
            raise self._rejected(
                request, "require_user_authorization", result, UnauthorizedError(USERS_ONLY_MESSAGE)
            )

        request.state.username = result.claim.username
        return await call_next(request)

    async def require_company_authorization(self, request: Request, call_next: CallNext) -> Any:
        """Accept only company tokens and attach ``company``."""
        result = self.verify(request)
        if not isinstance(result, Verified) or not isinstance(result.claim, CompanyClaim):
            raise self._rejected(
                request,
                "require_company_authorization",
                result,
                UnauthorizedError(COMPANIES_ONLY_MESSAGE),
            )

        request.state.company = result.claim.handle
        return await call_next(request)

    async def require_correct_user(self, request: Request, call_next: CallNext) -> Any:
        """Accept only a user token whose username equals the path parameter."""
        result = self.verify(request)
        target = request.path_params.get(self.user_param)
        if not (
            isinstance(result, Verified)
            and isinstance(result.claim, UserClaim)
            and result.claim.username == target
        ):
            raise self._rejected(
                request, "require_correct_user", result, ForbiddenError(FORBIDDEN_MESSAGE)
            )

        return await call_next(request)

    async def require_correct_company(self, request: Request, call_next: CallNext) -> Any:
        """Accept only a company token whose handle equals the path parameter."""
        result = self.verify(request)
        target = request.path_params.get(self.company_param)
        if not (
            isinstance(result, Verified)
            and isinstance(result.claim, CompanyClaim)
            and result.claim.handle == target
        ):
            raise self._rejected(
                request, "require_correct_company", result, ForbiddenError(FORBIDDEN_MESSAGE)
            )

        return await call_next(request)

    def _rejected(
        self,
        request: Request,
        operation: str,
        result: TokenResult,
        error: AuthorizationError,
    ) -> AuthorizationError:
        # A Verified result here means the role or owner did not match.
        reason = result.reason.value if isinstance(result, Rejected) else "claim_mismatch"
        logger.info(
            "Rejected request",
            extra={
                "operation": operation,
                "reason": reason,
                "status": error.status,
                "path": request.scope.get("path", ""),
            },
        )
        return error
