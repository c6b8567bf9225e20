"""FastAPI dependencies exposing the scope phases to route handlers.

Each factory binds one scope id and returns a dependency callable::

    SignReset = Annotated[Callable[[str], str], Depends(sign_url_dependency("reset"))]

    @router.get("/reset", dependencies=[Depends(verify_url_dependency("reset"))])
    def reset(complete: Annotated[Callable[[], None], Depends(complete_url_dependency("reset"))]):
        ...
        complete()

The :class:`~hsu.pipeline.scope.Hsu` instance is read from ``app.state.hsu``
and the session from ``request.session`` (see
:class:`~hsu.api.session.ServerSessionMiddleware`).
"""

from __future__ import annotations

from collections.abc import Callable
from urllib.parse import quote

from fastapi import Request

from hsu.pipeline.scope import Hsu, SignedUrlScope
from hsu.utils.errors import ConfigurationError


def get_hsu(request: Request) -> Hsu:
    """Return the configured Hsu instance from application state."""
    hsu = getattr(request.app.state, "hsu", None)
    if hsu is None:
        raise ConfigurationError("app.state.hsu is not configured")
    return hsu


def request_target(request: Request) -> str:
    """Return the request path and query exactly as the client sent them.

    ``request.url`` is rebuilt from the decoded path, so an escaped ``%3F`` or
    ``%23`` in a path segment would split into a bogus query or fragment.
    """
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.split(b"?", 1)[0].decode("ascii", "surrogateescape")
    else:
        path = quote(request.scope["path"])
    query = request.scope.get("query_string", b"").decode("ascii", "surrogateescape")
    return f"{path}?{query}" if query else path


def _scope(request: Request, scope_id: str) -> SignedUrlScope:
    return get_hsu(request).scope(scope_id)


def _require_scope_id(scope_id: str) -> None:
    if not isinstance(scope_id, str) or not scope_id:
        raise ConfigurationError("A non-empty scope id is required")


def sign_url_dependency(scope_id: str) -> Callable[[Request], Callable[[str], str]]:
    """Dependency yielding ``sign(url)`` for *scope_id* in the visitor's session."""
    _require_scope_id(scope_id)

    def setup(request: Request) -> Callable[[str], str]:
        return _scope(request, scope_id).setup(request.session)

    return setup


def verify_url_dependency(scope_id: str) -> Callable[[Request], None]:
    """Dependency that rejects the request unless its URL verifies.

    Raises :class:`~hsu.utils.errors.BadDigestError` or
    :class:`~hsu.utils.errors.DigestTimeoutError`.
    """
    _require_scope_id(scope_id)

    def verify(request: Request) -> None:
        _scope(request, scope_id).verify(request.session, request_target(request))

    return verify


def complete_url_dependency(scope_id: str) -> Callable[[Request], Callable[[], None]]:
    """Dependency yielding ``complete()`` which consumes the scope's salt."""
    _require_scope_id(scope_id)

    def complete(request: Request) -> Callable[[], None]:
        return _scope(request, scope_id).complete(request.session)

    return complete
