"""Scope phases (setup / verify / complete) wired into a request pipeline."""

from hsu.pipeline.scope import Hsu, SignedUrlScope

__all__ = ["Hsu", "SignedUrlScope"]
