"""Utility modules for HSU.

- **digest** -- HMAC-SHA256 digest construction, constant-time comparison
  and salt generation.
- **url_canonical** -- the canonical ``path?query`` string that is signed.
- **errors** -- exception hierarchy rooted at HsuError, each class with a
  stable ``code`` (EBADHMACDIGEST, ETIMEOUTHMACDIGEST, ...).
- **logging** -- structlog setup: coloured console output in development,
  JSON in production, sensitive keys redacted.
"""

from hsu.utils.digest import compute_digest, digests_match, generate_salt
from hsu.utils.errors import (
    BadDigestError,
    ConfigurationError,
    DigestTimeoutError,
    HsuError,
    SignedUrlRejectedError,
)
from hsu.utils.logging import configure_logging, get_logger
from hsu.utils.url_canonical import canonical_path, canonicalize

__all__ = [
    "BadDigestError",
    "ConfigurationError",
    "DigestTimeoutError",
    "HsuError",
    "SignedUrlRejectedError",
    "canonical_path",
    "canonicalize",
    "compute_digest",
    "configure_logging",
    "digests_match",
    "generate_salt",
    "get_logger",
]
