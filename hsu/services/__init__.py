"""Signing services: salt storage, URL signer and URL verifier."""

from hsu.services.salt_store import SaltStore
from hsu.services.signer import UrlSigner
from hsu.services.verifier import UrlVerifier

__all__ = ["SaltStore", "UrlSigner", "UrlVerifier"]
