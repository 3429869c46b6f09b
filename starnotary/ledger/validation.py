"""
starnotary/ledger/validation.py

Chain Validation

Walks the block sequence and checks, for every block that has a
successor:
    1. block.self_check()                              - stored hash still matches
    2. block.hash == next.previous_block_hash          - link to the next block

Both checks record the block's index on failure, so one bad block can
appear twice in the report. The final block only gets a self-check
when include_tail=True; by default it is trusted until a successor
links to it.

This module contains ZERO hash computation. Self-checks delegate to Block.
"""

from typing import List, Sequence

from starnotary.core.models import Block, ValidationReport


def validate_chain(
    blocks:       Sequence[Block],
    include_tail: bool = False,
) -> ValidationReport:
    """
    Validate block self-consistency and hash linkage.

    Args:
        blocks:       The chain, genesis first.
        include_tail: Also self-check the last block.

    Returns:
        ValidationReport listing every offending index, duplicates kept.
    """
    errors: List[int] = []

    for i in range(len(blocks) - 1):
        block = blocks[i]

        if not block.self_check():
            errors.append(i)

        if block.hash != blocks[i + 1].previous_block_hash:
            errors.append(i)

    if include_tail and blocks and not blocks[-1].self_check():
        errors.append(len(blocks) - 1)

    return ValidationReport(error_indices=errors)
