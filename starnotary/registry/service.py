"""
starnotary/registry/service.py

Star Registry Service

submit_star() MUST, in this exact order:
  1. Verify ownership       - OwnershipVerifier.verify(); failures propagate unchanged
  2. Build the draft        - Block.create({"owner": address, "star": star})
  3. Append                 - StarChain.append(); its result and errors propagate unchanged

No retries. From step 3, a CandidateRejectedError means nothing was
appended; a ChainIntegrityError means the block WAS appended.
"""

import logging
from typing import Any, Dict, List, Optional

from starnotary.core.config import RegistryConfig
from starnotary.core.models import Block, ValidationReport
from starnotary.core.time import Clock, unix_seconds
from starnotary.ledger.chain import StarChain
from starnotary.registry.ownership import OwnershipVerifier

logger = logging.getLogger(__name__)


class StarRegistryService:
    """
    Public operation surface of the star registry.

    Usage:
        registry  = StarRegistryService()
        message   = registry.request_ownership_challenge(wallet.address)
        signature = wallet.sign_message(message)
        block     = registry.submit_star(wallet.address, message, signature, star)
    """

    def __init__(
        self,
        config:   Optional[RegistryConfig]    = None,
        chain:    Optional[StarChain]         = None,
        verifier: Optional[OwnershipVerifier] = None,
        clock:    Clock                       = unix_seconds,
    ) -> None:
        self.config = config if config is not None else RegistryConfig()
        self.chain = chain if chain is not None else StarChain(
            genesis_data= self.config.genesis_data,
            clock=        clock,
        )
        self.verifier = verifier if verifier is not None else OwnershipVerifier(
            window_seconds= self.config.challenge_window_seconds,
            suffix=         self.config.challenge_suffix,
            clock=          clock,
        )

    # ── Chain passthrough ─────────────────────────────────────

    @property
    def height(self) -> int:
        return self.chain.height

    def get_block_by_hash(self, block_hash: str) -> Optional[Block]:
        return self.chain.get_block_by_hash(block_hash)

    def get_block_by_height(self, height: int) -> Optional[Block]:
        return self.chain.get_block_by_height(height)

    def validate_chain(self) -> ValidationReport:
        return self.chain.validate()

    # ── Ownership workflow ────────────────────────────────────

    def request_ownership_challenge(self, address: str) -> str:
        return self.verifier.issue_challenge(address)

    def submit_star(
        self,
        address:   str,
        message:   str,
        signature: str,
        star:      Any,
    ) -> Block:
        """
        Register star for address once the signed challenge checks out.

        Raises:
            ChallengeFormatError, ChallengeExpiredError, SignatureInvalidError
                                - from ownership verification, nothing appended
            ValidationError     - star is not JSON-encodable, or the draft
                                  does not extend the tail
                                  (CandidateRejectedError); nothing appended
            ChainIntegrityError - chain invalid after append; block stays
        """
        self.verifier.verify(address, message, signature)

        block = self.chain.append(
            Block.create({"owner": address, "star": star})
        )
        logger.info("Star registered for %s at height %d", address, block.height)
        return block

    def get_stars_by_wallet_address(self, address: str) -> List[Dict[str, Any]]:
        """
        Decoded bodies of every block owned by address, lowest height first.
        The Genesis Block is never a candidate.
        Raises DecodeError if any block body fails to decode.
        """
        stars = []
        for block in self.chain.blocks[1:]:
            body = block.decode_body()
            if body.get("owner") == address:
                stars.append(body)
        return stars


# ── Global Instance Helpers ───────────────────────────────────

_global_registry: Optional[StarRegistryService] = None


def init_global_registry(
    config: Optional[RegistryConfig] = None,
) -> StarRegistryService:
    """
    Initialize and return the process-wide registry.
    Calling again replaces the previous instance and its chain.
    """
    global _global_registry
    _global_registry = StarRegistryService(config=config)
    return _global_registry


def get_global_registry() -> Optional[StarRegistryService]:
    """Return the global registry, or None if not yet initialized."""
    return _global_registry
