"""Pydantic request/response schemas for the HSU demo API.

FastAPI uses these for validation, serialisation and the generated OpenAPI
docs.  Response schemas end with "Response".
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    session_backend: str


class SignedLinkResponse(BaseModel):
    """A freshly signed one-time link."""

    url: str
    expires: int = Field(description="Unix time after which the link is rejected")


class ResetResponse(BaseModel):
    """Result of following a valid reset link."""

    status: str = "ok"
    user: str


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    code: str
    detail: str | None = None
