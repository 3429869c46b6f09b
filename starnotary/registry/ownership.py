"""
starnotary/registry/ownership.py

Ownership Challenges

Challenge format:
    <address>:<unix seconds>:<suffix>          suffix defaults to "starRegistry"

A wallet proves ownership by signing the exact challenge string.
verify() checks, in this order:
    1. Freshness: now - issued_at < window    (exactly window seconds is expired)
    2. Signature: verify_message(message, address, signature)

Freshness is evaluated once, at verification time.
"""

import logging
from typing import Callable

from starnotary.core.config import DEFAULT_CHALLENGE_SUFFIX, DEFAULT_CHALLENGE_WINDOW
from starnotary.core.crypto import verify_message
from starnotary.core.exceptions import (
    ChallengeExpiredError,
    ChallengeFormatError,
    SignatureInvalidError,
)
from starnotary.core.time import Clock, unix_seconds

logger = logging.getLogger(__name__)

SignatureVerifier = Callable[[str, str, str], bool]


class OwnershipVerifier:
    """Issues and checks time-windowed ownership challenges."""

    def __init__(
        self,
        window_seconds:   int               = DEFAULT_CHALLENGE_WINDOW,
        suffix:           str               = DEFAULT_CHALLENGE_SUFFIX,
        clock:            Clock             = unix_seconds,
        verify_signature: SignatureVerifier = verify_message,
    ) -> None:
        self.window_seconds    = window_seconds
        self.suffix            = suffix
        self._clock            = clock
        self._verify_signature = verify_signature

    def issue_challenge(self, address: str) -> str:
        """Return the message the wallet must sign. No side effects."""
        return f"{address}:{self._clock()}:{self.suffix}"

    @staticmethod
    def parse_timestamp(message: str) -> int:
        """
        Extract the issue time (second ':'-separated field) from a challenge.
        Raises ChallengeFormatError if it is missing or not an integer.
        """
        if not isinstance(message, str):
            raise ChallengeFormatError(
                f"challenge must be str, got {type(message).__name__}"
            )
        parts = message.split(":")
        if len(parts) < 2:
            raise ChallengeFormatError(
                "challenge has no timestamp field",
                {"message": message},
            )
        try:
            return int(parts[1])
        except ValueError as exc:
            raise ChallengeFormatError(
                "challenge timestamp is not an integer",
                {"message": message},
            ) from exc

    def verify(self, address: str, message: str, signature: str) -> bool:
        """
        Check freshness, then the signature.

        Returns True on success.
        Raises:
            ChallengeFormatError  - message has no integer timestamp
            ChallengeExpiredError - challenge is window_seconds old or older
            SignatureInvalidError - signature does not verify
        """
        issued_at = self.parse_timestamp(message)
        elapsed   = self._clock() - issued_at

        if elapsed >= self.window_seconds:
            logger.warning(
                "Expired challenge for %s: %ds old", address, elapsed,
            )
            raise ChallengeExpiredError(
                "Ownership challenge has expired",
                {"elapsed": elapsed, "window": self.window_seconds},
            )

        if not self._verify_signature(message, address, signature):
            logger.warning("Invalid signature for %s", address)
            raise SignatureInvalidError(
                "Signature does not match address and message",
                {"address": address},
            )

        return True
