"""Server-side session middleware.

Gives every request a per-visitor ``dict`` at ``request.session`` (the same
attribute Starlette's cookie session uses), backed by an
:class:`~hsu.interfaces.session_backend.ISessionBackend`.

Only an opaque random id travels in the cookie; pending salts stay on the
server.  A session is written back only when the request changed it, and a
cookie is issued only once a new session has something in it.
"""

from __future__ import annotations

import secrets
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from hsu.interfaces.session_backend import ISessionBackend
from hsu.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_SESSION_ID_BYTES = 32


class ServerSessionMiddleware(BaseHTTPMiddleware):
    """Load the visitor's session before the route runs and save it after.

    Parameters
    ----------
    app:
        The wrapped ASGI application.
    backend:
        Where session dicts are persisted.
    cookie_name:
        Name of the cookie carrying the session id.
    max_age:
        Cookie lifetime in seconds.
    secure:
        Set the ``Secure`` cookie flag (HTTPS-only deployments).
    """

    def __init__(
        self,
        app: ASGIApp,
        backend: ISessionBackend,
        cookie_name: str = "hsu_session",
        max_age: int = 72 * 3600,
        secure: bool = False,
    ) -> None:
        super().__init__(app)
        self._backend = backend
        self._cookie_name = cookie_name
        self._max_age = max_age
        self._secure = secure

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        session_id = request.cookies.get(self._cookie_name)
        data: dict[str, Any] | None = None
        if session_id:
            data = await self._backend.load(session_id)

        is_new = data is None
        if data is None:
            session_id = secrets.token_urlsafe(_SESSION_ID_BYTES)
            data = {}

        snapshot = dict(data)
        request.scope["session"] = data

        response = await call_next(request)

        if data == snapshot:
            return response

        if data:
            await self._backend.save(session_id, data)
            if is_new:
                response.set_cookie(
                    self._cookie_name,
                    session_id,
                    max_age=self._max_age,
                    httponly=True,
                    samesite="lax",
                    secure=self._secure,
                )
                _logger.debug("session_created", backend=self._backend.get_provider_name())
        elif not is_new:
            await self._backend.delete(session_id)
            response.delete_cookie(self._cookie_name)

        return response
