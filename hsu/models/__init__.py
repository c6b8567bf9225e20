"""HSU models: signing configuration and verification outcomes."""

from hsu.models.config import HsuConfig, build_config
from hsu.models.signing import VerificationResult

__all__ = ["HsuConfig", "VerificationResult", "build_config"]
