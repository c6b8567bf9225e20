"""Shared pytest fixtures for the HSU test suite."""

from __future__ import annotations

import itertools
from typing import Any

import pytest

from hsu.models.config import HsuConfig
from hsu.pipeline.scope import Hsu

NOW = 1_700_000_000


class FakeClock:
    """Callable clock whose time only moves when a test moves it."""

    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SequentialSalts:
    """Deterministic salt factory: ``salt-0``, ``salt-1``, ..."""

    def __init__(self) -> None:
        self._counter = itertools.count()
        self.issued: list[str] = []

    def __call__(self) -> str:
        salt = f"salt-{next(self._counter)}"
        self.issued.append(salt)
        return salt


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def salts() -> SequentialSalts:
    return SequentialSalts()


@pytest.fixture
def config() -> HsuConfig:
    """The worked example configuration: secret ``s3cr3t``, one hour TTL."""
    return HsuConfig(secret="s3cr3t", ttl_seconds=3600)


@pytest.fixture
def hsu(config: HsuConfig, clock: FakeClock, salts: SequentialSalts) -> Hsu:
    return Hsu(config, clock=clock, salt_factory=salts)


@pytest.fixture
def session() -> dict[str, Any]:
    """A visitor's session: a plain dict stands in for any session store."""
    return {}
