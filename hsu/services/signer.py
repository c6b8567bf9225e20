"""URL signing for a scope.

Signing always issues a fresh salt, even when the scope already has a
pending one.  The old salt is overwritten, which invalidates every earlier
unconsumed URL for that scope: only the most recently signed link per scope
can be honoured.

Signing flow
------------
    raw_url ──strip expires/signature──▶ + expires=now+ttl
            ──canonicalize (minus signature)──▶ digest(salt, secret, canonical)
            ──▶ session[prefix + scope_id] = salt
            ──▶ raw_url + expires + signature
"""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from hsu.models.config import HsuConfig
from hsu.services.salt_store import SaltStore, SessionState
from hsu.utils.digest import compute_digest, generate_salt
from hsu.utils.logging import get_logger
from hsu.utils.url_canonical import (
    EXPIRES_KEY,
    SIGNATURE_KEY,
    canonicalize,
    query_pairs,
    with_query,
)

_RESERVED_KEYS = frozenset({EXPIRES_KEY, SIGNATURE_KEY})


class UrlSigner:
    """Produces signed URLs and records the pending salt in the session.

    Parameters
    ----------
    config:
        Immutable signing configuration (secret, TTL, key prefix, ordering).
    clock:
        Returns the current time in seconds since the epoch.
    salt_factory:
        Returns a new non-empty random salt.
    """

    def __init__(
        self,
        config: HsuConfig,
        clock: Callable[[], float] = time.time,
        salt_factory: Callable[[], str] = generate_salt,
    ) -> None:
        self._config = config
        self._clock = clock
        self._salt_factory = salt_factory
        self._logger: structlog.BoundLogger = get_logger(__name__)

    def sign(self, scope_id: str, session: SessionState, raw_url: str) -> str:
        """Sign *raw_url* for *scope_id* and return the signed URL.

        Any ``expires`` or ``signature`` parameters already on *raw_url* are
        replaced.  Mutates *session*.
        """
        salt = self._salt_factory()
        expires = int(self._clock()) + self._config.ttl_seconds

        pairs = [pair for pair in query_pairs(raw_url) if pair[0] not in _RESERVED_KEYS]
        pairs.append((EXPIRES_KEY, str(expires)))
        unsigned_url = with_query(raw_url, pairs)

        canonical = canonicalize(
            unsigned_url, exclude_keys=(SIGNATURE_KEY,), sort=self._config.sort_query
        )
        digest = compute_digest(salt, self._config.secret, canonical)

        SaltStore(session, self._config.session_key_prefix).set(scope_id, salt)

        pairs.append((SIGNATURE_KEY, digest))
        signed_url = with_query(raw_url, pairs)

        self._logger.debug(
            "url_signed",
            scope_id=scope_id,
            path=canonical.split("?", 1)[0],
            expires=expires,
        )
        return signed_url
