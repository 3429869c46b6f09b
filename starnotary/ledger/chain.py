"""
starnotary/ledger/chain.py

Star Chain - in-memory, append-only, hash-linked

append() MUST, in this exact order, while holding the lock:
  1. Assign height       - current sequence length
  2. Assign time         - clock(), whole seconds
  3. Assign prev hash    - tail hash, or None for genesis
  4. Seal                - block.hash = hash_link(...)
  5. Assert tail link    - candidate must extend the current tail,
                           else CandidateRejectedError and nothing is appended
  6. Append              - state advances here
  7. Validate            - full chain pass over the extended sequence

If step 7 reports the chain invalid, ChainIntegrityError is raised and
the block STAYS appended. There is no rollback. A failed validation is
an alarm for the caller, not a condition the chain repairs.

Thread-safe via internal lock (single-process only). The lock makes
append a single-writer critical section: two concurrent appends can
never observe the same length.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from starnotary.core.exceptions import (
    CandidateRejectedError,
    ChainIntegrityError,
    ValidationError,
)
from starnotary.core.models import GENESIS_DATA, Block, ValidationReport
from starnotary.core.time import Clock, unix_seconds
from starnotary.ledger.validation import validate_chain

logger = logging.getLogger(__name__)


class StarChain:
    """
    Owns the block sequence and serializes every mutation of it.

    Chain state:
        _blocks - the sequence, genesis first
        _height - len(_blocks) - 1, or -1 before initialize()

    The sequence is never handed out by reference. ``blocks`` returns a
    copy of the list; the Block objects inside are the stored ones.
    """

    def __init__(
        self,
        genesis_data: str   = GENESIS_DATA,
        clock:        Clock = unix_seconds,
        initialize:   bool  = True,
    ) -> None:
        self._genesis_data = genesis_data
        self._clock        = clock

        self._lock:   threading.Lock = threading.Lock()
        self._blocks: List[Block]    = []
        self._height: int            = -1

        if initialize:
            self.initialize()

    # ── State ─────────────────────────────────────────────────

    @property
    def height(self) -> int:
        """Current chain height. -1 before initialize()."""
        return self._height

    @property
    def blocks(self) -> List[Block]:
        """Copy of the block sequence."""
        return list(self._blocks)

    @property
    def last_block(self) -> Optional[Block]:
        blocks = self._blocks
        return blocks[-1] if blocks else None

    def __len__(self) -> int:
        return len(self._blocks)

    # ── Mutation ──────────────────────────────────────────────

    def initialize(self) -> Block:
        """
        Append the Genesis Block if the chain is empty.
        Idempotent: returns the existing genesis on later calls.
        """
        with self._lock:
            if self._height == -1:
                genesis = self._append_locked(Block.genesis(self._genesis_data))
                logger.info("Genesis block created: %s", genesis.hash)
            return self._blocks[0]

    def append(self, block: Block) -> Block:
        """
        Seal block onto the tail of the chain and validate the chain.
        On an empty chain the block becomes block 0 with no previous hash.

        Raises:
            ValidationError        - block is already sealed
            CandidateRejectedError - block does not extend the tail;
                                     nothing appended
            ChainIntegrityError    - post-append validation failed;
                                     the block remains appended
        Returns:
            The appended block.
        """
        with self._lock:
            return self._append_locked(block)

    # ── Lookup ────────────────────────────────────────────────

    def get_block_by_hash(self, block_hash: str) -> Optional[Block]:
        """First block whose hash equals block_hash, or None."""
        for block in list(self._blocks):
            if block.hash == block_hash:
                return block
        return None

    def get_block_by_height(self, height: int) -> Optional[Block]:
        """First block whose height equals height, or None."""
        for block in list(self._blocks):
            if block.height == height:
                return block
        return None

    # ── Validation ────────────────────────────────────────────

    def validate(self) -> ValidationReport:
        """Validate every block that has a successor."""
        return validate_chain(self.blocks)

    def audit(self) -> ValidationReport:
        """validate() plus a self-check of the most recent block."""
        return validate_chain(self.blocks, include_tail=True)

    def get_stats(self) -> Dict[str, Any]:
        """Return current chain state snapshot."""
        blocks = self.blocks
        return {
            "height":     self._height,
            "length":     len(blocks),
            "tail_hash":  blocks[-1].hash if blocks else None,
            "first_time": blocks[0].time if blocks else None,
            "last_time":  blocks[-1].time if blocks else None,
        }

    # ── Internal ──────────────────────────────────────────────

    def _append_locked(self, block: Block) -> Block:
        """Steps 1 to 7 of append(). Caller holds self._lock."""
        if block.is_sealed():
            raise ValidationError(
                "block is already sealed",
                {"hash": block.hash},
            )

        tail = self._blocks[-1] if self._blocks else None

        block.height              = len(self._blocks)
        block.time                = self._clock()
        block.previous_block_hash = tail.hash if tail else None
        block.seal()

        self._assert_extends_tail(block, tail)

        self._blocks.append(block)
        self._height = len(self._blocks) - 1

        report = validate_chain(self._blocks)
        if not report:
            logger.warning(
                "Chain invalid after appending block %d: %r",
                block.height, report,
            )
            raise ChainIntegrityError(
                "Chain is not valid after append",
                {
                    "height":        block.height,
                    "error_count":   report.error_count,
                    "error_indices": report.error_indices,
                },
                report=report,
                block=block,
            )

        logger.debug("Appended block %d: %s", block.height, block.hash)
        return block

    def _assert_extends_tail(self, block: Block, tail: Optional[Block]) -> None:
        """
        Raise CandidateRejectedError if the sealed candidate does not extend tail.
        Nothing has been appended when this raises.
        """
        expected_height = tail.height + 1 if tail else 0
        if block.height != expected_height:
            raise CandidateRejectedError(
                "Candidate height does not extend the tail",
                {"expected": expected_height, "got": block.height},
            )

        expected_prev = tail.hash if tail else None
        if block.previous_block_hash != expected_prev:
            raise CandidateRejectedError(
                "Candidate does not link to the tail hash",
                {"height": block.height},
            )

        if not block.self_check():
            raise CandidateRejectedError(
                "Candidate hash does not match its fields",
                {"height": block.height},
            )
