"""URL verification for a scope.

Recomputes the digest from the scope's pending salt and the incoming URL,
then checks the signed expiry.  Verification never changes the session, so
an unexpired, uncompleted URL verifies any number of times; consuming it is
the job of the scope's ``complete`` phase.
"""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from hsu.models.config import HsuConfig
from hsu.models.signing import VerificationResult
from hsu.services.salt_store import SaltStore, SessionState
from hsu.utils.digest import compute_digest, digests_match
from hsu.utils.logging import get_logger
from hsu.utils.url_canonical import EXPIRES_KEY, SIGNATURE_KEY, canonicalize, query_value


def parse_expires(raw: str | None) -> int:
    """Parse the ``expires`` parameter; missing or garbage means already expired."""
    if raw is None:
        return 0
    try:
        return int(raw)
    except ValueError:
        return 0


class UrlVerifier:
    """Checks incoming URLs against the pending salt of a scope.

    Parameters
    ----------
    config:
        The same configuration the signer used.
    clock:
        Returns the current time in seconds since the epoch.
    """

    def __init__(
        self,
        config: HsuConfig,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._clock = clock
        self._logger: structlog.BoundLogger = get_logger(__name__)

    def verify(self, scope_id: str, session: SessionState, url: str) -> VerificationResult:
        """Return VALID, INVALID or TIMED_OUT for *url* under *scope_id*."""
        salt = SaltStore(session, self._config.session_key_prefix).get(scope_id)
        if salt is None:
            self._logger.info("url_rejected", scope_id=scope_id, reason="no_pending_salt")
            return VerificationResult.INVALID

        canonical = canonicalize(url, exclude_keys=(SIGNATURE_KEY,), sort=self._config.sort_query)
        expected = compute_digest(salt, self._config.secret, canonical)
        provided = query_value(url, SIGNATURE_KEY) or ""

        if not digests_match(expected, provided):
            self._logger.info("url_rejected", scope_id=scope_id, reason="digest_mismatch")
            return VerificationResult.INVALID

        expires = parse_expires(query_value(url, EXPIRES_KEY))
        if self._clock() < expires:
            self._logger.debug("url_verified", scope_id=scope_id, expires=expires)
            return VerificationResult.VALID

        self._logger.info("url_rejected", scope_id=scope_id, reason="expired", expires=expires)
        return VerificationResult.TIMED_OUT
