"""
starnotary/core/models.py

Block Data Model

═══════════════════════════════════════════════════════════════════
CONTRACTS
═══════════════════════════════════════════════════════════════════

CONTRACT 1 - Body
    body = hex(JCS(payload))
    payload is a JSON object: {"data": ...} for genesis,
    {"owner": address, "star": star} for an ownership record.

CONTRACT 2 - Hash
    hash = hash_link(height, time, previousBlockHash, body)
    The hash field is never part of its own input.
    Computed once, when the chain seals the block. Never recomputed.

CONTRACT 3 - Linking
    genesis.previousBlockHash is None
    blocks[i + 1].previousBlockHash == blocks[i].hash

CONTRACT 4 - Height
    blocks[i].height == i, assigned by the chain at append time.

A Block built by Block.create() is a draft: height, time,
previousBlockHash and hash stay None until StarChain.append() seals it.
Blocks are plain mutable records; integrity is detected, not enforced.
═══════════════════════════════════════════════════════════════════
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from starnotary.core.canonical import canonicalize, hash_link
from starnotary.core.exceptions import DecodeError, ValidationError


# ─────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────

GENESIS_DATA = "Genesis Block"


# ─────────────────────────────────────────────────────────────
# Block
# ─────────────────────────────────────────────────────────────

@dataclass
class Block:
    """A single chain entry. See module docstring for the four contracts."""

    body:                str
    height:              Optional[int] = None
    time:                Optional[int] = None
    previous_block_hash: Optional[str] = None
    hash:                Optional[str] = None

    # ── Constructors ──────────────────────────────────────────

    @classmethod
    def create(cls, payload: Dict[str, Any]) -> "Block":
        """
        Create an unsealed draft block carrying payload as its body.

        Raises ValidationError if payload is not a JSON-encodable dict.
        """
        if not isinstance(payload, dict):
            raise ValidationError(
                f"block payload must be dict, got {type(payload).__name__}"
            )
        try:
            encoded = canonicalize(payload)
        except (TypeError, ValueError) as exc:
            raise ValidationError(
                f"block payload is not JSON-encodable: {exc}"
            ) from exc
        return cls(body=encoded.hex())

    @classmethod
    def genesis(cls, data: str = GENESIS_DATA) -> "Block":
        """Draft of the fixed first block."""
        return cls.create({"data": data})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Block":
        """Deserialize from the wire dict produced by to_dict()."""
        return cls(
            body=                data["body"],
            height=              data.get("height"),
            time=                data.get("time"),
            previous_block_hash= data.get("previousBlockHash"),
            hash=                data.get("hash"),
        )

    # ── Hashing ───────────────────────────────────────────────

    def compute_hash(self) -> str:
        """HashLink over the current linking fields and body."""
        return hash_link(
            self.height,
            self.time,
            self.previous_block_hash,
            self.body,
        )

    def seal(self) -> "Block":
        """Fix this block's hash from its current fields. Returns self."""
        self.hash = self.compute_hash()
        return self

    def is_sealed(self) -> bool:
        return self.hash is not None

    def self_check(self) -> bool:
        """
        Recompute the hash from the current fields and compare to the
        stored hash. False for an unsealed block. Never raises.
        """
        if self.hash is None:
            return False
        try:
            return self.compute_hash() == self.hash
        except (TypeError, ValueError):
            return False

    # ── Body ──────────────────────────────────────────────────

    def decode_body(self) -> Dict[str, Any]:
        """
        Decode the hex body back to its payload dict.

        Raises DecodeError if the body is not hex-encoded UTF-8 JSON
        or does not decode to an object.
        """
        try:
            payload = json.loads(bytes.fromhex(self.body).decode("utf-8"))
        except (TypeError, ValueError) as exc:
            raise DecodeError(
                "block body could not be decoded",
                {"height": self.height, "reason": exc},
            ) from exc
        if not isinstance(payload, dict):
            raise DecodeError(
                "block body is not a JSON object",
                {"height": self.height},
            )
        return payload

    # ── Serialization ─────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash":              self.hash,
            "height":            self.height,
            "body":              self.body,
            "time":              self.time,
            "previousBlockHash": self.previous_block_hash,
        }

    def __str__(self) -> str:
        prev = self.previous_block_hash[:16] + "..." if self.previous_block_hash else "None"
        return (
            f"Block #{self.height}\n"
            f"  Hash: {(self.hash or '')[:16]}...\n"
            f"  Prev: {prev}\n"
            f"  Time: {self.time}"
        )


# ─────────────────────────────────────────────────────────────
# ValidationReport
# ─────────────────────────────────────────────────────────────

@dataclass
class ValidationReport:
    """
    Result of a chain validation pass.

    Returned, not raised, so callers can choose hard fail vs log.
    bool(report) is True iff valid.

    error_indices may list the same index twice: once for a failed
    self-check and once for a broken link to the following block.
    """
    error_indices: List[int] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.error_indices

    @property
    def error_count(self) -> int:
        return len(self.error_indices)

    def __bool__(self) -> bool:
        return self.valid

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid":       self.valid,
            "error_count": self.error_count,
            "blocks":      list(self.error_indices),
        }

    def __repr__(self) -> str:
        if self.valid:
            return "ValidationReport(VALID)"
        return f"ValidationReport(INVALID, blocks={self.error_indices})"
