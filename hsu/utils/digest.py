"""Keyed digest construction for signed URLs.

The digest is ``Base64(HMAC-SHA256(key=secret, msg=salt + "." + secret + "." + canonical))``.
The secret appears both as the key and inside the message; removing either
occurrence changes the wire format, so both stay.

The construction is never parsed back into its parts, only recomputed from
the same template, so ``.`` inside any input is harmless.
"""

import base64
import hashlib
import hmac
import secrets

# Bytes of entropy per salt; token_urlsafe renders 24 bytes as 32 characters.
SALT_BYTES = 24


def compute_digest(salt: str, secret: str, canonical: str) -> str:
    """Return the base64 HMAC-SHA256 digest for a canonical URL string.

    Args:
        salt: The pending salt for the scope.
        secret: The configured signing secret.
        canonical: Output of :func:`hsu.utils.url_canonical.canonicalize`.

    Returns:
        A 44-character standard base64 string.
    """
    message = f"{salt}.{secret}.{canonical}".encode("utf-8")
    mac = hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()
    return base64.b64encode(mac).decode("ascii")


def digests_match(expected: str, provided: str) -> bool:
    """Constant-time comparison of two digest strings.

    Both sides are encoded as UTF-8 with ``surrogateescape``, so a
    ``provided`` value decoded from arbitrary query bytes yields ``False``
    instead of raising.
    """
    return hmac.compare_digest(
        expected.encode("utf-8", "surrogateescape"),
        provided.encode("utf-8", "surrogateescape"),
    )


def generate_salt() -> str:
    """Return a fresh, non-empty, URL-safe random salt."""
    return secrets.token_urlsafe(SALT_BYTES)
