"""HSU API layer: routes, schemas, dependencies, sessions and middleware."""

from hsu.api.dependencies import (
    complete_url_dependency,
    sign_url_dependency,
    verify_url_dependency,
)
from hsu.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from hsu.api.routes import router
from hsu.api.session import ServerSessionMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "ServerSessionMiddleware",
    "complete_url_dependency",
    "router",
    "sign_url_dependency",
    "verify_url_dependency",
]
