"""The setup / verify / complete phases of a signing scope.

A scope id names one independent signing flow (e.g. ``"reset"`` for password
reset links).  The caller wires the three phases into its own request
handling, sharing the same scope id:

    setup     ──▶ hands out ``sign(url)`` bound to this scope and session
    verify    ──▶ rejects the request unless the URL is VALID
    complete  ──▶ hands out ``complete()`` that deletes the pending salt

Per scope and session the lifecycle is::

    Unsigned ──sign──▶ Pending ──complete──▶ Consumed
                        │   ▲
                        └───┘ re-sign (new salt, new expiry)

Verify does not move the state.  Until ``complete()`` is called a valid URL
can be replayed up to its expiry.
"""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from hsu.models.config import HsuConfig, build_config
from hsu.models.signing import VerificationResult
from hsu.services.salt_store import SaltStore, SessionState
from hsu.services.signer import UrlSigner
from hsu.services.verifier import UrlVerifier
from hsu.utils.digest import generate_salt
from hsu.utils.errors import BadDigestError, ConfigurationError, DigestTimeoutError
from hsu.utils.logging import get_logger


class SignedUrlScope:
    """The three phases for one scope id.  Obtain via :meth:`Hsu.scope`."""

    def __init__(
        self,
        scope_id: str,
        config: HsuConfig,
        signer: UrlSigner,
        verifier: UrlVerifier,
    ) -> None:
        self._scope_id = scope_id
        self._config = config
        self._signer = signer
        self._verifier = verifier
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def scope_id(self) -> str:
        return self._scope_id

    def setup(self, session: SessionState) -> Callable[[str], str]:
        """Return ``sign(url) -> signed_url`` bound to this scope and *session*."""

        def sign(url: str) -> str:
            return self._signer.sign(self._scope_id, session, url)

        return sign

    def check(self, session: SessionState, url: str) -> VerificationResult:
        """Return the verification outcome without raising."""
        return self._verifier.verify(self._scope_id, session, url)

    def verify(self, session: SessionState, url: str) -> None:
        """Let the request proceed, or raise.

        Raises:
            BadDigestError: forged, tampered, superseded or consumed URL.
            DigestTimeoutError: correctly signed but past its expiry.
        """
        result = self.check(session, url)
        if result is VerificationResult.INVALID:
            raise BadDigestError(scope_id=self._scope_id)
        if result is VerificationResult.TIMED_OUT:
            raise DigestTimeoutError(scope_id=self._scope_id)

    def complete(self, session: SessionState) -> Callable[[], None]:
        """Return a callable that consumes the pending salt for this scope.

        Calling it invalidates the URL just used and any earlier unconsumed
        one for the scope.  Not calling it leaves the URL reusable until it
        expires.
        """
        store = SaltStore(session, self._config.session_key_prefix)

        def complete() -> None:
            removed = store.delete(self._scope_id)
            self._logger.debug("scope_completed", scope_id=self._scope_id, removed=removed)

        return complete

    def is_pending(self, session: SessionState) -> bool:
        return SaltStore(session, self._config.session_key_prefix).is_pending(self._scope_id)


class Hsu:
    """Entry point: validated configuration plus a factory for scopes.

    Either pass a ready :class:`HsuConfig` or the raw options::

        hsu = Hsu(secret="s3cr3t", ttl_seconds=600)
        reset = hsu.scope("reset")

    Raises:
        ConfigurationError: if no usable secret (or another invalid option)
            is supplied.
    """

    def __init__(
        self,
        config: HsuConfig | None = None,
        *,
        clock: Callable[[], float] = time.time,
        salt_factory: Callable[[], str] = generate_salt,
        **options: object,
    ) -> None:
        if config is None:
            config = build_config(**options)
        elif options:
            raise ConfigurationError("Pass either a config object or options, not both")
        self._config = config
        self._signer = UrlSigner(config, clock=clock, salt_factory=salt_factory)
        self._verifier = UrlVerifier(config, clock=clock)

    @property
    def config(self) -> HsuConfig:
        return self._config

    def scope(self, scope_id: str) -> SignedUrlScope:
        """Return the phases for *scope_id*.

        Raises:
            ConfigurationError: if *scope_id* is empty.
        """
        if not isinstance(scope_id, str) or not scope_id:
            raise ConfigurationError("A non-empty scope id is required")
        return SignedUrlScope(scope_id, self._config, self._signer, self._verifier)
