"""Error formatter: renders rejections as JSON responses.

Every error body has the same shape::

    {"status": 401, "title": "Unauthorized", "message": "..."}
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from jobly_auth.exceptions import AuthorizationError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Something went wrong. Please try again later."
VALIDATION_ERROR_MESSAGE = "The request is invalid"


def error_body(status: int, message: str, title: str | None = None) -> dict[str, object]:
    """Build the JSON error body for a status code."""
    if title is None:
        try:
            title = HTTPStatus(status).phrase
        except ValueError:
            title = "Error"
    return {"status": status, "title": title, "message": message}


async def authorization_error_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
    return JSONResponse(exc.to_dict(), status_code=exc.status)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    body = error_body(exc.status_code, "")
    body["message"] = exc.detail if isinstance(exc.detail, str) else body["title"]
    return JSONResponse(
        body,
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Submitted values are never echoed back; they may hold passwords.
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    message = f"{VALIDATION_ERROR_MESSAGE}: {problems}" if problems else VALIDATION_ERROR_MESSAGE
    return JSONResponse(error_body(422, message), status_code=422)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Details go to the log only; the body stays generic.
    logger.exception(
        "Unhandled error while serving request",
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(error_body(500, INTERNAL_ERROR_MESSAGE), status_code=500)


def install_error_handlers(app: FastAPI) -> None:
    """Register the JSON error formatter on an application.

    Args:
        app: The FastAPI application to configure.
    """
    app.add_exception_handler(AuthorizationError, authorization_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
