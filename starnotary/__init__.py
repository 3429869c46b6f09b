"""
starnotary/__init__.py

starnotary: Volatile Hash-Linked Star Registry

Wallets prove ownership by signing a time-stamped challenge. Accepted
stars are appended to an in-memory chain where every block stores the
hash of its predecessor.
"""

__version__ = "0.1.0"

from starnotary.core.config import RegistryConfig
from starnotary.core.crypto import WalletKey, verify_message
from starnotary.core.exceptions import (
    CandidateRejectedError,
    ChainIntegrityError,
    ChallengeExpiredError,
    ChallengeFormatError,
    DecodeError,
    OwnershipError,
    SignatureInvalidError,
    StarNotaryError,
    ValidationError,
)
from starnotary.core.models import GENESIS_DATA, Block, ValidationReport
from starnotary.ledger import StarChain, validate_chain
from starnotary.registry import (
    OwnershipVerifier,
    StarRegistryService,
    get_global_registry,
    init_global_registry,
)

__all__ = [
    # Core types
    "Block",
    "StarChain",
    "StarRegistryService",
    "OwnershipVerifier",
    "ValidationReport",
    "WalletKey",
    "RegistryConfig",
    # Errors
    "StarNotaryError",
    "ValidationError",
    "ChallengeFormatError",
    "CandidateRejectedError",
    "OwnershipError",
    "ChallengeExpiredError",
    "SignatureInvalidError",
    "ChainIntegrityError",
    "DecodeError",
    # Helpers
    "validate_chain",
    "verify_message",
    "init_global_registry",
    "get_global_registry",
    # Constants
    "GENESIS_DATA",
]
