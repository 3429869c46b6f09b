"""
Shared fixtures: wallets and a pinned clock.
"""

import pytest

from starnotary.core.crypto import WalletKey


class FrozenClock:
    """Callable clock returning a settable whole-second Unix time."""

    def __init__(self, now: int = 1_700_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def wallet():
    """A fresh wallet key for each test."""
    return WalletKey.generate()


@pytest.fixture
def wallet2():
    """A second independent wallet - used in multi-owner tests."""
    return WalletKey.generate()
