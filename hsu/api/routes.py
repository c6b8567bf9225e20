"""FastAPI routes for the HSU demo service.

A password-reset style flow shows the three phases end to end.

# Endpoint                 Method  Description
# ───────────────────────────────────────────────────────────────────
# /api/v1/health           GET     Health check + session backend
# /api/v1/reset/link       GET     Sign a one-time reset link (setup)
# /api/v1/reset            GET     Follow the link (verify + complete)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated
from urllib.parse import urlencode

import structlog
from fastapi import APIRouter, Depends, Query, Request

from hsu import __version__
from hsu.api.dependencies import (
    complete_url_dependency,
    sign_url_dependency,
    verify_url_dependency,
)
from hsu.api.schemas import HealthResponse, ResetResponse, SignedLinkResponse
from hsu.services.verifier import parse_expires
from hsu.utils.logging import get_logger
from hsu.utils.url_canonical import EXPIRES_KEY, query_value

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")

RESET_SCOPE = "reset"

SignResetDep = Annotated[Callable[[str], str], Depends(sign_url_dependency(RESET_SCOPE))]
CompleteResetDep = Annotated[Callable[[], None], Depends(complete_url_dependency(RESET_SCOPE))]


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Report liveness and the configured session backend."""
    backend = getattr(request.app.state, "session_backend", None)
    return HealthResponse(
        status="ok",
        version=__version__,
        session_backend=backend.get_provider_name() if backend else "none",
    )


@router.get("/reset/link", response_model=SignedLinkResponse)
def reset_link(
    sign: SignResetDep,
    user: Annotated[str, Query(min_length=1)],
) -> SignedLinkResponse:
    """Issue a reset link for *user*; any earlier link stops working."""
    signed = sign(f"{router.prefix}/reset?{urlencode({'user': user})}")
    _logger.info("reset_link_issued", user=user)
    return SignedLinkResponse(url=signed, expires=parse_expires(query_value(signed, EXPIRES_KEY)))


@router.get(
    "/reset",
    response_model=ResetResponse,
    dependencies=[Depends(verify_url_dependency(RESET_SCOPE))],
)
def reset(
    complete: CompleteResetDep,
    user: Annotated[str, Query(min_length=1)],
) -> ResetResponse:
    """Perform the reset for a verified link and consume it."""
    complete()
    _logger.info("reset_performed", user=user)
    return ResetResponse(user=user)
