"""Custom exception hierarchy for HSU.

All application exceptions inherit from :class:`HsuError`, which carries a
stable machine-readable ``code`` so the request layer can map failures to
responses without string matching.

    HsuError  (base -- catch-all for any HSU error)
    +-- ConfigurationError         (startup / missing secret or scope id)
    +-- SignedUrlRejectedError     (verification failed for a scope)
        +-- BadDigestError         (EBADHMACDIGEST -- forged, tampered, consumed)
        +-- DigestTimeoutError     (ETIMEOUTHMACDIGEST -- valid but expired)

Rejections are split so callers can offer "request a new link" on a timeout
instead of a hard denial.
"""


class HsuError(Exception):
    """Base exception for all HSU errors.

    Every subclass carries a human-readable ``message``, a stable ``code``
    and the HTTP ``status_code`` the API layer should answer with.
    """

    code: str = "EHSU"
    status_code: int = 500

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        self._message = message
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    def __str__(self) -> str:
        return f"[{self.code}] {self._message}"


class ConfigurationError(HsuError):
    """Raised when configuration is invalid or missing at construction time."""

    code = "ECONFIG"

    def __init__(self, message: str = "Invalid or missing configuration") -> None:
        super().__init__(message=message)


# ---------------------------------------------------------------------------
# Verification rejections
# ---------------------------------------------------------------------------

class SignedUrlRejectedError(HsuError):
    """Raised when an incoming URL fails verification for a scope."""

    status_code = 403

    def __init__(
        self,
        message: str = "Signed URL rejected",
        scope_id: str | None = None,
    ) -> None:
        self._scope_id = scope_id
        super().__init__(message=message)

    @property
    def scope_id(self) -> str | None:
        return self._scope_id


class BadDigestError(SignedUrlRejectedError):
    """Digest mismatch, or no pending salt for the scope.

    Retrying with the same URL cannot succeed.
    """

    code = "EBADHMACDIGEST"
    status_code = 403

    def __init__(
        self,
        message: str = "URL signature is invalid",
        scope_id: str | None = None,
    ) -> None:
        super().__init__(message=message, scope_id=scope_id)


class DigestTimeoutError(SignedUrlRejectedError):
    """Digest matched but the signed expiry has elapsed."""

    code = "ETIMEOUTHMACDIGEST"
    status_code = 410

    def __init__(
        self,
        message: str = "URL signature has expired",
        scope_id: str | None = None,
    ) -> None:
        super().__init__(message=message, scope_id=scope_id)
