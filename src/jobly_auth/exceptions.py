"""Exception hierarchy for authorization errors."""


class JoblyAuthError(Exception):
    """Base exception for all jobly-auth errors.

    This is the parent class for all exceptions raised by the
    jobly-auth package. Catching this exception will catch both
    request-time rejections and setup-time configuration errors.

    Example:
        try:
            settings = load_settings()
        except JoblyAuthError as e:
            logger.error(f"Failed to start: {e}")
    """


class AuthorizationError(JoblyAuthError):
    """Raised by an interceptor to terminate the current request.

    Carries everything the error formatter needs to render a response:
    an HTTP ``status``, a short ``title`` and a human-readable ``message``.
    Never carries token contents or decoder internals.

    Example:
        AuthorizationError(401, "Unauthorized", "Only users can access this resource.")
    """

    status: int = 500
    title: str = "Authorization Error"

    def __init__(
        self,
        status: int | None = None,
        title: str | None = None,
        message: str = "",
    ) -> None:
        super().__init__(message)
        if status is not None:
            self.status = status
        if title is not None:
            self.title = title
        self.message = message

    def to_dict(self) -> dict[str, object]:
        """Return the body rendered by the error formatter."""
        return {"status": self.status, "title": self.title, "message": self.message}


class UnauthorizedError(AuthorizationError):
    """Raised when the caller is not authenticated for the resource (401).

    Covers absent, malformed, expired and badly signed tokens, and tokens
    that verify but lack the role claim an interceptor requires.

    Example:
        UnauthorizedError("You need to authenticate before accessing this resource.")
    """

    status = 401
    title = "Unauthorized"

    def __init__(self, message: str) -> None:
        super().__init__(message=message)


class ForbiddenError(AuthorizationError):
    """Raised when the caller does not own the targeted resource (403).

    Example:
        ForbiddenError("You are not allowed to access this resource.")
    """

    status = 403
    title = "Forbidden"

    def __init__(self, message: str) -> None:
        super().__init__(message=message)


class ConfigurationError(JoblyAuthError):
    """Raised when authorization settings are missing or invalid.

    This exception is raised by load_settings() when the environment
    does not provide a usable signing secret or the token options are
    out of range.

    Example:
        ConfigurationError("Invalid authorization settings: secret_key: Field required")
    """


class MiddlewareValidationError(JoblyAuthError):
    """Raised when route or middleware configuration is invalid.

    This exception is raised at registration time, never while serving
    a request:
        - A middleware attribute contains non-callable values
        - Middleware is not async
        - A class handler(route): block is misconfigured

    Example:
        MiddlewareValidationError(
            "class get(route): middleware at index 1 must be async, got sync function check"
        )
    """
