"""
starnotary Ledger - Volatile Append-Only Star Chain

The chain lives in process memory only and is discarded with the process.
"""

from starnotary.ledger.chain import StarChain
from starnotary.ledger.validation import validate_chain

__all__ = ["StarChain", "validate_chain"]
