"""HSU: one-time HMAC signed URLs bound to a visitor's session.

Public entry points::

    from hsu import Hsu

    hsu = Hsu(secret="s3cr3t")
    reset = hsu.scope("reset")
    signed = reset.setup(session)("/reset?user=42")
    reset.verify(session, signed)      # raises on a bad or expired link
    reset.complete(session)()          # consume the link
"""

__version__ = "0.1.0"

from hsu.models.config import HsuConfig, build_config
from hsu.models.signing import VerificationResult
from hsu.pipeline.scope import Hsu, SignedUrlScope
from hsu.utils.errors import (
    BadDigestError,
    ConfigurationError,
    DigestTimeoutError,
    HsuError,
    SignedUrlRejectedError,
)

__all__ = [
    "BadDigestError",
    "ConfigurationError",
    "DigestTimeoutError",
    "Hsu",
    "HsuConfig",
    "HsuError",
    "SignedUrlRejectedError",
    "SignedUrlScope",
    "VerificationResult",
    "build_config",
    "__version__",
]
