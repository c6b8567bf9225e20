"""Unit tests for UrlSigner, UrlVerifier and SaltStore."""

from __future__ import annotations

from typing import Any

import pytest

from hsu.models.config import HsuConfig
from hsu.models.signing import VerificationResult
from hsu.services.salt_store import SaltStore
from hsu.services.signer import UrlSigner
from hsu.services.verifier import UrlVerifier, parse_expires
from hsu.utils.digest import compute_digest
from hsu.utils.url_canonical import query_value
from tests.conftest import NOW, FakeClock, SequentialSalts

RESET_URL = "/reset?user=42"


@pytest.fixture
def signer(config: HsuConfig, clock: FakeClock, salts: SequentialSalts) -> UrlSigner:
    return UrlSigner(config, clock=clock, salt_factory=salts)


@pytest.fixture
def verifier(config: HsuConfig, clock: FakeClock) -> UrlVerifier:
    return UrlVerifier(config, clock=clock)


# ======================================================================
# SaltStore
# ======================================================================


class TestSaltStore:
    def test_keys_use_prefix(self) -> None:
        session: dict[str, Any] = {}
        SaltStore(session, "hsu-").set("reset", "abc")
        assert session == {"hsu-reset": "abc"}

    def test_get_missing_returns_none(self) -> None:
        assert SaltStore({}, "hsu-").get("reset") is None

    def test_non_string_values_are_ignored(self) -> None:
        assert SaltStore({"hsu-reset": 123}, "hsu-").get("reset") is None
        assert SaltStore({"hsu-reset": ""}, "hsu-").get("reset") is None

    def test_set_overwrites_pending_salt(self) -> None:
        store = SaltStore({}, "hsu-")
        store.set("reset", "old")
        store.set("reset", "new")
        assert store.get("reset") == "new"

    def test_delete_reports_presence(self) -> None:
        store = SaltStore({"hsu-reset": "abc"}, "hsu-")
        assert store.delete("reset") is True
        assert store.delete("reset") is False
        assert store.is_pending("reset") is False


# ======================================================================
# Signing
# ======================================================================


class TestUrlSigner:
    def test_worked_example(self, signer: UrlSigner, session: dict[str, Any]) -> None:
        signed = signer.sign("reset", session, RESET_URL)

        assert signed.startswith(f"/reset?user=42&expires={NOW + 3600}&signature=")
        assert query_value(signed, "signature") == compute_digest(
            "salt-0", "s3cr3t", f"/reset?expires={NOW + 3600}&user=42"
        )

    def test_writes_salt_into_session(self, signer: UrlSigner, session: dict[str, Any]) -> None:
        signer.sign("reset", session, RESET_URL)
        assert session == {"hsu-reset": "salt-0"}

    def test_respects_custom_prefix_and_ttl(self, clock: FakeClock, salts: SequentialSalts) -> None:
        config = HsuConfig(secret="k", ttl_seconds=60, session_key_prefix="links:")
        session: dict[str, Any] = {}
        signed = UrlSigner(config, clock=clock, salt_factory=salts).sign("dl", session, "/f")

        assert query_value(signed, "expires") == str(NOW + 60)
        assert session == {"links:dl": "salt-0"}

    def test_replaces_existing_expires_and_signature(
        self, signer: UrlSigner, session: dict[str, Any]
    ) -> None:
        signed = signer.sign("reset", session, "/reset?user=42&expires=1&signature=old")

        assert signed.count("expires=") == 1
        assert signed.count("signature=") == 1
        assert query_value(signed, "expires") == str(NOW + 3600)

    def test_keeps_fragment_and_host(
        self, signer: UrlSigner, verifier: UrlVerifier, session: dict[str, Any]
    ) -> None:
        url = "https://www.google.com.au/webhp?sourceid=chrome-instant&ion=1#q=npm+hsu"
        signed = signer.sign("search", session, url)

        assert signed.startswith("https://www.google.com.au/webhp?")
        assert signed.endswith("#q=npm+hsu")
        assert verifier.verify("search", session, signed) is VerificationResult.VALID

    def test_path_without_query(self, signer: UrlSigner, session: dict[str, Any]) -> None:
        signed = signer.sign("dl", session, "/download")
        assert signed.startswith(f"/download?expires={NOW + 3600}&signature=")

    def test_keeps_undecodable_query_bytes(
        self, signer: UrlSigner, verifier: UrlVerifier, session: dict[str, Any]
    ) -> None:
        signed = signer.sign("reset", session, "/reset?user=%FF")

        assert signed.startswith(f"/reset?user=%FF&expires={NOW + 3600}&signature=")
        assert verifier.verify("reset", session, signed) is VerificationResult.VALID

    def test_keeps_escaped_path(
        self, signer: UrlSigner, verifier: UrlVerifier, session: dict[str, Any]
    ) -> None:
        signed = signer.sign("dl", session, "/files/a%3Fb.txt")

        assert signed.startswith("/files/a%3Fb.txt?expires=")
        assert verifier.verify("dl", session, signed) is VerificationResult.VALID


# ======================================================================
# Verification
# ======================================================================


class TestUrlVerifier:
    def test_round_trip_is_valid(
        self, signer: UrlSigner, verifier: UrlVerifier, session: dict[str, Any]
    ) -> None:
        signed = signer.sign("reset", session, RESET_URL)
        assert verifier.verify("reset", session, signed) is VerificationResult.VALID

    def test_absolute_request_url_verifies_relative_signed_link(
        self, signer: UrlSigner, verifier: UrlVerifier, session: dict[str, Any]
    ) -> None:
        signed = signer.sign("reset", session, RESET_URL)
        incoming = f"https://app.example.com{signed}"
        assert verifier.verify("reset", session, incoming) is VerificationResult.VALID

    def test_expired_after_ttl(
        self,
        signer: UrlSigner,
        verifier: UrlVerifier,
        clock: FakeClock,
        session: dict[str, Any],
    ) -> None:
        signed = signer.sign("reset", session, RESET_URL)
        clock.advance(3601)
        assert verifier.verify("reset", session, signed) is VerificationResult.TIMED_OUT

    def test_expired_exactly_at_expiry(
        self,
        signer: UrlSigner,
        verifier: UrlVerifier,
        clock: FakeClock,
        session: dict[str, Any],
    ) -> None:
        signed = signer.sign("reset", session, RESET_URL)
        clock.advance(3600)
        assert verifier.verify("reset", session, signed) is VerificationResult.TIMED_OUT

    def test_valid_just_before_expiry(
        self,
        signer: UrlSigner,
        verifier: UrlVerifier,
        clock: FakeClock,
        session: dict[str, Any],
    ) -> None:
        signed = signer.sign("reset", session, RESET_URL)
        clock.advance(3599.5)
        assert verifier.verify("reset", session, signed) is VerificationResult.VALID

    @pytest.mark.parametrize(
        ("original", "tampered"),
        [
            ("user=42", "user=43"),
            (f"expires={NOW + 3600}", f"expires={NOW + 7200}"),
            ("/reset?", "/reset?admin=1&"),
            ("/reset?", "/other?"),
            ("user=42&", ""),
        ],
    )
    def test_tampering_is_invalid(
        self,
        signer: UrlSigner,
        verifier: UrlVerifier,
        session: dict[str, Any],
        original: str,
        tampered: str,
    ) -> None:
        signed = signer.sign("reset", session, RESET_URL)
        forged = signed.replace(original, tampered, 1)

        assert forged != signed
        assert verifier.verify("reset", session, forged) is VerificationResult.INVALID

    @pytest.mark.parametrize("replacement", ["%FE", "%EF%BF%BD", "%C3%BF"])
    def test_tampering_undecodable_bytes_is_invalid(
        self,
        signer: UrlSigner,
        verifier: UrlVerifier,
        session: dict[str, Any],
        replacement: str,
    ) -> None:
        signed = signer.sign("reset", session, "/reset?user=%FF")
        forged = signed.replace("user=%FF", f"user={replacement}", 1)

        assert forged != signed
        assert verifier.verify("reset", session, forged) is VerificationResult.INVALID

    def test_undecodable_signature_is_invalid(
        self, signer: UrlSigner, verifier: UrlVerifier, session: dict[str, Any]
    ) -> None:
        signed = signer.sign("reset", session, RESET_URL)
        forged = signed.split("&signature=")[0] + "&signature=%FF%FE"
        assert verifier.verify("reset", session, forged) is VerificationResult.INVALID

    def test_tampered_and_expired_reports_invalid(
        self,
        signer: UrlSigner,
        verifier: UrlVerifier,
        clock: FakeClock,
        session: dict[str, Any],
    ) -> None:
        signed = signer.sign("reset", session, RESET_URL)
        clock.advance(10_000)
        forged = signed.replace("user=42", "user=1")
        assert verifier.verify("reset", session, forged) is VerificationResult.INVALID

    def test_missing_signature_is_invalid(
        self, signer: UrlSigner, verifier: UrlVerifier, session: dict[str, Any]
    ) -> None:
        signed = signer.sign("reset", session, RESET_URL)
        unsigned = signed.split("&signature=")[0]
        assert verifier.verify("reset", session, unsigned) is VerificationResult.INVALID

    def test_garbage_signature_is_invalid(
        self, signer: UrlSigner, verifier: UrlVerifier, session: dict[str, Any]
    ) -> None:
        signer.sign("reset", session, RESET_URL)
        url = f"/reset?user=42&expires={NOW + 3600}&signature=%C3%A9%C3%A9"
        assert verifier.verify("reset", session, url) is VerificationResult.INVALID

    def test_missing_salt_is_invalid(
        self, signer: UrlSigner, verifier: UrlVerifier, session: dict[str, Any]
    ) -> None:
        signed = signer.sign("reset", session, RESET_URL)
        assert verifier.verify("reset", {}, signed) is VerificationResult.INVALID

    def test_other_secret_is_invalid(
        self, signer: UrlSigner, clock: FakeClock, session: dict[str, Any]
    ) -> None:
        signed = signer.sign("reset", session, RESET_URL)
        other = UrlVerifier(HsuConfig(secret="different"), clock=clock)
        assert other.verify("reset", session, signed) is VerificationResult.INVALID

    def test_resign_invalidates_previous_url(
        self, signer: UrlSigner, verifier: UrlVerifier, session: dict[str, Any]
    ) -> None:
        first = signer.sign("reset", session, RESET_URL)
        second = signer.sign("reset", session, RESET_URL)

        assert verifier.verify("reset", session, first) is VerificationResult.INVALID
        assert verifier.verify("reset", session, second) is VerificationResult.VALID

    def test_verification_does_not_mutate_session(
        self, signer: UrlSigner, verifier: UrlVerifier, session: dict[str, Any]
    ) -> None:
        signed = signer.sign("reset", session, RESET_URL)
        before = dict(session)

        assert verifier.verify("reset", session, signed) is VerificationResult.VALID
        assert verifier.verify("reset", session, signed) is VerificationResult.VALID
        assert session == before

    def test_reordered_query_is_valid_when_sorting(
        self, signer: UrlSigner, verifier: UrlVerifier, session: dict[str, Any]
    ) -> None:
        signed = signer.sign("reset", session, "/reset?user=42&lang=en")
        path, query = signed.split("?", 1)
        reordered = f"{path}?{'&'.join(reversed(query.split('&')))}"

        assert verifier.verify("reset", session, reordered) is VerificationResult.VALID

    def test_reordered_query_is_invalid_when_preserving_order(
        self, clock: FakeClock, salts: SequentialSalts
    ) -> None:
        config = HsuConfig(secret="s3cr3t", sort_query=False)
        session: dict[str, Any] = {}
        signed = UrlSigner(config, clock=clock, salt_factory=salts).sign(
            "reset", session, "/reset?user=42&lang=en"
        )
        path, query = signed.split("?", 1)
        reordered = f"{path}?{'&'.join(reversed(query.split('&')))}"
        verifier = UrlVerifier(config, clock=clock)

        assert verifier.verify("reset", session, signed) is VerificationResult.VALID
        assert verifier.verify("reset", session, reordered) is VerificationResult.INVALID


class TestParseExpires:
    def test_missing_is_zero(self) -> None:
        assert parse_expires(None) == 0

    def test_garbage_is_zero(self) -> None:
        assert parse_expires("tomorrow") == 0

    def test_integer_string(self) -> None:
        assert parse_expires("1700003600") == 1700003600
