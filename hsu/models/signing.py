"""Verification outcome for signed URLs."""

from __future__ import annotations

from enum import Enum


class VerificationResult(str, Enum):  # noqa: UP042
    """Outcome of checking an incoming URL against its scope's pending salt.

    There is no "missing salt" outcome: an absent salt can never match any
    digest, so it is reported as INVALID.
    """

    VALID = "VALID"
    INVALID = "INVALID"
    TIMED_OUT = "TIMED_OUT"
