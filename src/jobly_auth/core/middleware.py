"""Interceptor chains for route handlers.

Provides RouteConfig, the route metaclass, and chain assembly. Interceptors
share the signature ``async (request, call_next)``: they either return
``await call_next(request)`` or raise to terminate the request.
"""

import inspect
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from jobly_auth.exceptions import MiddlewareValidationError

Interceptor = Callable[[Any, Callable[[Any], Awaitable[Any]]], Awaitable[Any]]


@dataclass(frozen=True)
class RouteConfig:
    """A route handler bundled with its interceptors and metadata.

    Created by the _RouteMeta metaclass when a class inherits from route.
    Callable: delegates to the wrapped handler function.

    Attributes:
        handler: The endpoint function (async def or def).
        middleware: Interceptors run before the handler, outermost first.
        tags: Optional OpenAPI tags.
        summary: Optional OpenAPI summary.
        status_code: Optional HTTP status code override.
    """

    handler: Callable[..., Any]
    middleware: Sequence[Interceptor] = ()
    tags: tuple[str, ...] | None = None
    summary: str | None = None
    status_code: int | None = None

    def __post_init__(self) -> None:
        # Keep handler metadata visible to introspection and OpenAPI docs.
        object.__setattr__(self, "__wrapped__", self.handler)
        object.__setattr__(self, "__name__", getattr(self.handler, "__name__", "handler"))
        object.__setattr__(self, "__doc__", getattr(self.handler, "__doc__", None))

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        """Delegate to the wrapped handler."""
        return self.handler(*args, **kwargs)


def normalize_middleware(
    middleware_attr: Any,
    *,
    source: str = "",
) -> tuple[Interceptor, ...]:
    """Normalize a middleware value to a tuple of async interceptors.

    Accepts: None, single callable, list, or tuple.

    Args:
        middleware_attr: The middleware value to normalize.
        source: Context for error messages (e.g., "class get(route)").

    Returns:
        Tuple of interceptors (empty if None).

    Raises:
        MiddlewareValidationError: If the value is not a supported container,
            or an entry is not callable or not async.
    """
    prefix = f"{source}: " if source else ""

    if middleware_attr is None:
        return ()
    if callable(middleware_attr) and not isinstance(middleware_attr, (list, tuple)):
        items: tuple[Any, ...] = (middleware_attr,)
    elif isinstance(middleware_attr, (list, tuple)):
        items = tuple(middleware_attr)
    else:
        raise MiddlewareValidationError(
            f"{prefix}middleware must be a list or callable, got {type(middleware_attr).__name__}"
        )

    for i, mw in enumerate(items):
        if not callable(mw):
            raise MiddlewareValidationError(f"{prefix}non-callable middleware at index {i}")
        if not _is_async(mw):
            raise MiddlewareValidationError(
                f"{prefix}middleware at index {i} must be async, "
                f"got sync function {getattr(mw, '__name__', type(mw).__name__)}"
            )
    return items


def _is_async(fn: Any) -> bool:
    # Bound methods and callable instances with an async __call__ both qualify.
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None)
    )


class _RouteMeta(type):
    """Metaclass that turns a class body into a RouteConfig.

    ``class get(route): ...`` produces a RouteConfig, not a class. The body
    must define ``handler`` and may define ``middleware``, ``tags``,
    ``summary`` and ``status_code``.
    """

    def __new__(
        mcs,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
    ) -> Any:  # Returns RouteConfig, not type
        if not bases:
            return super().__new__(mcs, name, bases, namespace)

        handler = namespace.get("handler")
        if handler is None:
            raise MiddlewareValidationError(
                f"class {name}(route) must define an async def handler(...) function"
            )
        if not callable(handler):
            raise MiddlewareValidationError(
                f"class {name}(route): handler must be a callable, got {type(handler).__name__}"
            )

        middleware = normalize_middleware(
            namespace.get("middleware"),
            source=f"class {name}(route)",
        )

        raw_tags = namespace.get("tags")
        return RouteConfig(
            handler=handler,
            middleware=middleware,
            tags=tuple(raw_tags) if raw_tags else None,
            summary=namespace.get("summary"),
            status_code=namespace.get("status_code"),
        )


class route(metaclass=_RouteMeta):  # noqa: N801
    """Base class for handlers guarded by interceptors.

    Example:
        from jobly_auth import route

        class patch(route):
            middleware = [authorizer.require_correct_user]
            tags = ["users"]

            async def handler(username: str, request: Request) -> dict:
                return {"username": username}
    """


def build_middleware_chain(
    handler: Callable[..., Any],
    middleware_stack: Sequence[Interceptor],
) -> Callable[..., Any]:
    """Wrap a handler function with an interceptor chain.

    The first interceptor in the list is the outermost (executes first).
    Each interceptor receives (request, call_next) where call_next invokes
    the next interceptor or the handler.

    Args:
        handler: The route handler, called as ``await handler(request)``.
        middleware_stack: Ordered sequence of interceptors (outermost first).

    Returns:
        The wrapped handler, or the handler unchanged if the stack is empty.
    """
    if not middleware_stack:
        return handler

    chain = handler
    for mw in reversed(middleware_stack):
        chain = _wrap_with_middleware(chain, mw)
    return chain


def _wrap_with_middleware(
    next_handler: Callable[..., Any],
    middleware: Interceptor,
) -> Callable[..., Any]:
    async def wrapped(request: Any) -> Any:
        async def call_next(req: Any) -> Any:
            return await next_handler(req)

        return await middleware(request, call_next)

    wrapped.__name__ = (
        f"{getattr(middleware, '__name__', 'middleware')}"
        f"_wrapping_{getattr(next_handler, '__name__', 'handler')}"
    )
    wrapped.__qualname__ = wrapped.__name__
    return wrapped
