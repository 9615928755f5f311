import logging
from typing import Awaitable, Callable, Type, TypeVar

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from simplemvvm.domain import IHost, IScope

logger = logging.getLogger(__name__)

T = TypeVar("T")

SCOPE_STATE_ATTRIBUTE = "di_scope"


def create_fastapi_dependency(host: IHost, service_type: Type[T]) -> Callable[[], T]:
    """Create a FastAPI Depends() callable that resolves from the host's root scope.

    Args:
        host: The host to resolve services from.
        service_type: The type to resolve when the dependency is called.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> get_database = create_fastapi_dependency(host, DatabaseService)
        >>>
        >>> @app.get("/status")
        >>> async def status(db: DatabaseService = Depends(get_database)):
        ...     return db.status()
    """

    def dependency() -> T:
        """Resolve the service from the host."""
        return host.get(service_type)

    return dependency


def create_scoped_dependency(service_type: Type[T]) -> Callable[[Request], T]:
    """Create a FastAPI dependency that resolves from the request's scope.

    Requires the ScopedHostMiddleware to be installed.

    Args:
        service_type: The type to resolve from the request scope.

    Returns:
        A callable that resolves from the request scope.

    Example:
        >>> app.add_middleware(ScopedHostMiddleware, host=host)
        >>>
        >>> get_users = create_scoped_dependency(UserService)
        >>>
        >>> @app.get("/users")
        >>> async def list_users(users: UserService = Depends(get_users)):
        ...     return users.all()
    """

    def scoped_dependency(request: Request) -> T:
        """Resolve from the request's scope."""
        scope = getattr(request.state, SCOPE_STATE_ATTRIBUTE, None)
        if scope is None:
            raise RuntimeError(
                "Request does not have a service scope. Did you forget to add ScopedHostMiddleware?"
            )
        return scope.get_or_create(service_type)

    return scoped_dependency


class ScopedHostMiddleware(BaseHTTPMiddleware):
    """Middleware that opens a service scope for each request.

    The scope is available as ``request.state.di_scope`` and is disposed once the
    response has been produced, releasing scoped and transient instances.

    Attributes:
        host: The host to create scopes from.
    """

    def __init__(self, app: FastAPI, host: IHost):
        """Initialize the middleware with the host.

        Args:
            app: The FastAPI/Starlette application.
            host: The host to create scopes from.
        """
        super().__init__(app)
        self.host = host

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Create a scope for the request and execute the endpoint.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or endpoint handler.

        Returns:
            The response from the endpoint.
        """
        scope: IScope = self.host.create_scope()
        setattr(request.state, SCOPE_STATE_ATTRIBUTE, scope)

        try:
            return await call_next(request)
        finally:
            scope.dispose()
            logger.debug("Disposed request scope for %s %s", request.method, request.url.path)
